import logging
import sys
from .config import LOG_LEVEL, LOG_FORMAT, LOG_FILE

logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT, stream=sys.stdout)

if LOG_FILE:
    _file_handler = logging.FileHandler(LOG_FILE)
    _file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.getLogger("elasticsync").addHandler(_file_handler)

# Gürültülü kütüphanelerin log seviyesini ayarla
logging.getLogger("elastic_transport").setLevel(logging.WARNING)
logging.getLogger("pymongo").setLevel(logging.WARNING)

def get_logger(name):
    """İsimlendirilmiş bir logger instance'ı döndürür."""
    logger = logging.getLogger(name)
    return logger
