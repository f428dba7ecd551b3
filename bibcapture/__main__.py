import sys

from bibcapture.cli import cli

sys.exit(cli())
