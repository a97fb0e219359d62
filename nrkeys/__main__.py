"""Entry point for `python -m nrkeys`."""

from nrkeys.cli import main_entry

main_entry()
