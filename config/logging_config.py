"""
Configuration du logging de l'application.
"""
import logging
import os

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
LOG_LEVEL_ENV = 'LABELBRUSH_LOG_LEVEL'


def configure_logging(log_level: str = None, log_file: str = None) -> None:
    """
    Configure le logger racine.

    Args:
        log_level: Niveau de log (DEBUG, INFO, WARNING, ERROR). Si absent,
            la variable d'environnement LABELBRUSH_LOG_LEVEL est utilisée.
        log_file: Chemin vers le fichier de log (optionnel)
    """
    if log_level is None:
        log_level = os.environ.get(LOG_LEVEL_ENV, 'INFO')
    level = getattr(logging, str(log_level).upper(), logging.INFO)

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    handlers = [console_handler]

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True  # Force la reconfiguration si déjà configuré
    )
