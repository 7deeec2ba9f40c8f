"""Allow ``python -m mvnctl``."""

from mvnctl.cli import cli_main

if __name__ == "__main__":
    cli_main()
