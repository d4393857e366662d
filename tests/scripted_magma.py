"""Tiny line-oriented stand-in for an interactive Magma process.

Prints a banner and a prompt, then answers one statement per input line the
way Magma does on a terminal with echo turned off: output first, then the
next prompt without a newline.
"""

from __future__ import annotations

import re
import sys

HELPER_CALL = re.compile(r'^print OrgBabelMagmaResultType\("(?P<arg>.*)"\);$')
SET_PROMPT = re.compile(r'^SetPrompt\("(?P<prompt>.*)"\);$')
PRINT_STRING = re.compile(r'^print "(?P<text>.*)";$')
PRINT_SUM = re.compile(r"^print (?P<expr>[\d+ ]+);$")
ASSIGN = re.compile(r"^(?P<name>\w+) := eval (?P<value>.*);$")
SHOW = re.compile(r"^(?P<name>\w+);$")


def unescape(text: str) -> str:
    return re.sub(r"\\(.)", r"\1", text)


class Repl:
    def __init__(self) -> None:
        self.prompt = "> "
        self.names: dict[str, str] = {}

    def answer(self, statement: str) -> str | None:
        if match := SET_PROMPT.match(statement):
            self.prompt = unescape(match.group("prompt"))
            return None
        if match := HELPER_CALL.match(statement):
            return "table" if unescape(match.group("arg")).lstrip().startswith("[") else "string"
        if match := PRINT_STRING.match(statement):
            return unescape(match.group("text"))
        if match := PRINT_SUM.match(statement):
            return str(sum(int(part) for part in match.group("expr").split("+")))
        if match := ASSIGN.match(statement):
            self.names[match.group("name")] = match.group("value")
            return None
        if (match := SHOW.match(statement)) and match.group("name") in self.names:
            return self.names[match.group("name")]
        return None


def main() -> None:
    repl = Repl()
    sys.stdout.write("Magma V2.28-3\n\nType ? for help.  Type <Ctrl>-D to quit.\n\n")
    sys.stdout.write(repl.prompt)
    sys.stdout.flush()
    while True:
        line = sys.stdin.readline()
        if not line:
            break
        output = repl.answer(line.strip())
        if output is not None:
            sys.stdout.write(output + "\n")
        sys.stdout.write(repl.prompt)
        sys.stdout.flush()


if __name__ == "__main__":
    main()
