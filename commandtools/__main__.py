"""
python -m commandtools: an interactive loop with only the default commands.
"""
from .shell import Shell


def main():
    Shell().run()


if __name__ == '__main__':
    main()
