"""Allow running the reader with ``python -m sqs_reader``."""

from sqs_reader.cli import main

if __name__ == "__main__":
    main()
