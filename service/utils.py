# service/utils.py
import logging
from pathlib import Path
from datetime import datetime


def setup_logging(log_dir: Path, log_level: str = "INFO"):
    """Configure logging to a daily file plus the console"""
    log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / f"cv_matrix_{datetime.now().strftime('%Y%m%d')}.log"

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler()
        ]
    )
