#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
MaStR / NTP MCP servers: JSON-RPC over STDIO.
  mastr: get-sums  (installed renewable capacity from the Marktstammdatenregister)
  ntp:   get-time  (date and time from ptbtime1.ptb.de)
Logs go to stderr and logs/<server>.log; stdout carries protocol messages only.
"""

import argparse, sys
from logger import get_logger
from servers import SERVERS

def serve(name: str) -> int:
    log = get_logger(name)
    try:
        build, banner = SERVERS[name]
        server = build(logger=log)
        log.info(banner)
        server.serve_forever()
    except Exception:
        log.exception("Fatal error in main()")
        return 1
    return 0

def run_mastr():
    sys.exit(serve("mastr"))

def run_ntp():
    sys.exit(serve("ntp"))

def main():
    ap = argparse.ArgumentParser(description="MaStR / NTP MCP server over stdio")
    ap.add_argument("--server", choices=sorted(SERVERS), required=True)
    args = ap.parse_args()
    sys.exit(serve(args.server))

if __name__ == "__main__":
    main()
