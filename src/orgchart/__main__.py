"""Command-line interface."""
from orgchart.main import main

if __name__ == "__main__":
    main()
