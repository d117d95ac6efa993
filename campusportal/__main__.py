"""
`python -m campusportal` runs the same CLI as the `campusportal` script.
"""

from campusportal.cli import main

if __name__ == "__main__":
    main()
