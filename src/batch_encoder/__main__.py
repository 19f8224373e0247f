"""Allow running as python -m batch_encoder."""

from batch_encoder.cli import main

if __name__ == "__main__":
    main()
