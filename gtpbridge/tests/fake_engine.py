"""
Minimal GTP engine used by the subprocess tests.

Behaviour:
- boardsize / komi / clear_board / play: "="
- play <color> Z99: "? illegal move"
- genmove <color>: an info line, then "= Q16"
- genmove stall: never answers
- genmove crash: exits without answering
- genmove garble: a line of invalid UTF-8, then "= Q16"
- quit: "=" then exit
"""

import sys
import time


def respond(text):
    sys.stdout.write(text + "\n\n")
    sys.stdout.flush()


def main():
    for line in sys.stdin:
        parts = line.split()
        if not parts:
            continue
        command, args = parts[0], parts[1:]

        if command == "quit":
            respond("=")
            return
        if command == "play" and args[-1:] == ["Z99"]:
            respond("? illegal move")
        elif command == "genmove":
            color = args[0] if args else ""
            if color == "crash":
                return
            if color == "garble":
                sys.stdout.flush()
                sys.stdout.buffer.write(b"\xff\xfe info\n")
                sys.stdout.buffer.flush()
            if color == "stall":
                time.sleep(60)
                return
            sys.stdout.write("info: thinking\n")
            respond("= Q16")
        elif command in ("boardsize", "komi", "clear_board", "play"):
            respond("=")
        else:
            respond("? unknown command")


if __name__ == "__main__":
    main()
