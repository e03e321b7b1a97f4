"""Entry point for duckbench."""

import sys

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _usage():
    print("DuckBench - DuckDB database file viewer")
    print()
    print("Usage: duckbench [options] [FILE ...]")
    print()
    print("Options:")
    print("  --log-level LEVEL    Logging level (DEBUG, INFO, WARNING, ERROR)")
    print("  --version            Show the version and exit")
    print("  --help, -h           Show this help message")
    print()
    print("Each FILE is opened in its own tab. Without files the previous")
    print("session is restored.")


def main(argv=None):
    """Main entry point with argument handling."""
    args = list(sys.argv[1:] if argv is None else argv)
    paths = []
    log_level = None

    while args:
        arg = args.pop(0)

        if arg in ("--help", "-h"):
            _usage()
            sys.exit(0)

        elif arg == "--version":
            from duckbench.version import __version__
            print(f"duckbench {__version__}")
            sys.exit(0)

        elif arg == "--log-level" or arg.startswith("--log-level="):
            if "=" in arg:
                value = arg.split("=", 1)[1]
            elif args:
                value = args.pop(0)
            else:
                print("duckbench: --log-level requires a value", file=sys.stderr)
                sys.exit(2)
            if value.upper() not in LOG_LEVELS:
                print(f"duckbench: invalid log level: {value}", file=sys.stderr)
                sys.exit(2)
            log_level = value.upper()

        elif arg.startswith("-"):
            print(f"duckbench: unknown option: {arg}", file=sys.stderr)
            sys.exit(2)

        else:
            paths.append(arg)

    # Start the GUI application
    from duckbench.app import main as app_main
    sys.exit(app_main(paths, log_level))


if __name__ == "__main__":
    main()
