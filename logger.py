# Rotating logger to file and stderr. stdout belongs to the MCP transport.
import logging, os, sys
from logging.handlers import RotatingFileHandler

def get_logger(name: str):
    log = logging.getLogger(name)
    if log.handlers:
        return log
    log.propagate = False
    fmt = logging.Formatter("[%(asctime)s] %(levelname)s - %(message)s")
    ch = logging.StreamHandler(sys.stderr)
    ch.setFormatter(fmt)
    log.addHandler(ch)

    level = os.getenv("LOG_LEVEL", "INFO").upper()
    try:
        log.setLevel(level)
    except ValueError:
        log.setLevel(logging.INFO)
        log.warning(f"Unknown LOG_LEVEL {level!r}, using INFO")

    # stderr logging keeps working when the log directory is not writable
    log_dir = os.getenv("LOG_DIR", "logs")
    try:
        os.makedirs(log_dir, exist_ok=True)
        fh = RotatingFileHandler(os.path.join(log_dir, f"{name}.log"), maxBytes=512000, backupCount=2, encoding="utf-8")
    except OSError as ex:
        log.warning(f"File logging disabled ({log_dir}): {ex}")
        return log
    fh.setFormatter(fmt)
    log.addHandler(fh)
    return log
