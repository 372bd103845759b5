# -*- coding: utf-8 -*-

"""
Main entry point for launching SVG Inspector from a source checkout.
"""

import logging
import sys

from svg_inspector.logging_config import setup_logging
from svg_inspector.cli import main as cli_main


def main():
    """
    Configure logging and run the command-line front-end.
    """
    setup_logging()
    return cli_main(["--no-logging-setup", *sys.argv[1:]])


if __name__ == '__main__':
    code = main()
    logging.info("===== Application terminated =====")
    sys.exit(code)
