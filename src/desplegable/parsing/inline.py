"""Inline phrase parser.

Turns the text of a paragraph, heading or disclosure title into inline
tokens: text, backslash escapes, code spans, ``*em*``/``_em_``,
``**strong**``/``__strong__`` and soft/hard line breaks.

Block rules store raw text in ``inline`` tokens; ``process()`` fills their
``children`` once block tokenization is done. Disclosure titles are parsed
immediately, since the summary token carries its children directly.

Thread Safety:
Stateless. Safe to share across threads.
"""

from __future__ import annotations

from desplegable.tokens import Token, TokenType

# CommonMark ASCII punctuation (escapable characters)
ASCII_PUNCTUATION = frozenset("!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~")


def _inline(
    type_: TokenType, tag: str = "", nesting: int = 0, content: str = "", markup: str = ""
) -> Token:
    return Token(type=type_, tag=tag, nesting=nesting, content=content, markup=markup)


class InlineParser:
    """Recursive scanner over one run of inline text."""

    __slots__ = ()

    def process(self, tokens: list[Token]) -> None:
        """Parse the content of every ``inline`` token into its children."""
        for token in tokens:
            if token.type is TokenType.INLINE:
                token.children = self.parse(token.content)

    def parse(self, text: str) -> list[Token]:
        """Parse ``text`` into a flat list of inline tokens."""
        out: list[Token] = []
        self._scan(text, 0, len(text), out)
        return out

    def _scan(self, text: str, pos: int, end: int, out: list[Token]) -> None:
        pending: list[str] = []

        def flush() -> None:
            if pending:
                out.append(_inline(TokenType.TEXT, content="".join(pending)))
                pending.clear()

        while pos < end:
            ch = text[pos]

            if ch == "\\" and pos + 1 < end:
                nxt = text[pos + 1]
                if nxt == "\n":
                    flush()
                    out.append(_inline(TokenType.HARDBREAK, tag="br"))
                    pos = self._skip_leading_spaces(text, pos + 2, end)
                    continue
                if nxt in ASCII_PUNCTUATION:
                    pending.append(nxt)
                    pos += 2
                    continue

            if ch == "`":
                close = self._code_span(text, pos, end)
                if close is not None:
                    run, content_end, after = close
                    flush()
                    out.append(
                        _inline(
                            TokenType.CODE_INLINE,
                            tag="code",
                            content=self._normalize_code(text[pos + run : content_end]),
                            markup="`" * run,
                        )
                    )
                    pos = after
                    continue
                run_end = pos
                while run_end < end and text[run_end] == "`":
                    run_end += 1
                pending.append(text[pos:run_end])
                pos = run_end
                continue

            if ch == "*" or ch == "_":
                matched = self._emphasis(text, pos, end)
                if matched is not None:
                    size, close = matched
                    flush()
                    kind = (TokenType.STRONG_OPEN, TokenType.STRONG_CLOSE, "strong")
                    if size == 1:
                        kind = (TokenType.EM_OPEN, TokenType.EM_CLOSE, "em")
                    out.append(_inline(kind[0], tag=kind[2], nesting=1, markup=ch * size))
                    self._scan(text, pos + size, close, out)
                    out.append(_inline(kind[1], tag=kind[2], nesting=-1, markup=ch * size))
                    pos = close + size
                    continue

            if ch == "\n":
                trailing = 0
                if pending:
                    joined = "".join(pending)
                    stripped = joined.rstrip(" ")
                    trailing = len(joined) - len(stripped)
                    pending[:] = [stripped] if stripped else []
                flush()
                if trailing >= 2:
                    out.append(_inline(TokenType.HARDBREAK, tag="br"))
                else:
                    out.append(_inline(TokenType.SOFTBREAK))
                pos = self._skip_leading_spaces(text, pos + 1, end)
                continue

            pending.append(ch)
            pos += 1

        flush()

    @staticmethod
    def _skip_leading_spaces(text: str, pos: int, end: int) -> int:
        while pos < end and text[pos] == " ":
            pos += 1
        return pos

    @staticmethod
    def _code_span(text: str, pos: int, end: int) -> tuple[int, int, int] | None:
        """Find the closing backtick run matching the one at ``pos``.

        Returns:
            (run length, offset of closing run, offset after closing run),
            or None when the run is unmatched
        """
        run_end = pos
        while run_end < end and text[run_end] == "`":
            run_end += 1
        run = run_end - pos

        search = run_end
        while search < end:
            start = text.find("`", search, end)
            if start < 0:
                return None
            stop = start
            while stop < end and text[stop] == "`":
                stop += 1
            if stop - start == run:
                return run, start, stop
            search = stop
        return None

    @staticmethod
    def _normalize_code(content: str) -> str:
        content = content.replace("\n", " ")
        if len(content) >= 2 and content[0] == " " and content[-1] == " " and content.strip(" "):
            content = content[1:-1]
        return content

    @staticmethod
    def _emphasis(text: str, pos: int, end: int) -> tuple[int, int] | None:
        """Match a delimiter run at ``pos`` with a closer of the same size.

        Returns:
            (delimiter size, offset of the closing delimiter), or None
        """
        ch = text[pos]
        run_end = pos
        while run_end < end and text[run_end] == ch:
            run_end += 1
        size = 2 if run_end - pos >= 2 else 1
        if run_end - pos > 2:
            return None

        after = pos + size
        if after >= end or text[after].isspace():
            return None
        if ch == "_" and pos > 0 and text[pos - 1].isalnum():
            return None

        delimiter = ch * size
        search = after + 1
        while search < end:
            close = text.find(delimiter, search, end)
            if close < 0:
                return None
            # Same-size run only; "**" never closes "*"
            run_stop = close
            while run_stop < end and text[run_stop] == ch:
                run_stop += 1
            if run_stop - close != size or text[close - 1].isspace():
                search = run_stop
                continue
            if ch == "_" and run_stop < end and text[run_stop].isalnum():
                search = run_stop
                continue
            return size, close
        return None
