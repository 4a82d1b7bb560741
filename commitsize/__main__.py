"""Allow running the program with python -m commitsize."""

from commitsize.cli import commitsize

commitsize.main()
