import sys

from smallsh.shell import Shell


def main():
    return Shell().main_loop()


if __name__ == "__main__":
    sys.exit(main())
