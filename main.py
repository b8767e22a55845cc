import argparse
import sys

from PyQt6.QtWidgets import QApplication

from config.logging_config import configure_logging
from controllers.master_controller import MasterController, build_session


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Interactive label painting")
    parser.add_argument("--labels", nargs="+", default=["foreground", "background"], help="Label names, in order")
    parser.add_argument("--shape", nargs="+", type=int, default=[256, 256], help="Spatial grid shape (2D or 3D)")
    parser.add_argument("--timepoints", type=int, default=None, help="Number of timepoints (enables time series)")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ERROR")
    parser.add_argument("--log-file", default=None, help="Optional log file")
    return parser.parse_args(argv)


def run(argv=None) -> int:
    args = parse_args(argv)

    # Configuration du logging
    configure_logging(args.log_level, args.log_file)

    app = QApplication(sys.argv)

    session = build_session(
        args.labels,
        args.shape,
        time_series=args.timepoints is not None,
        num_timepoints=args.timepoints,
    )

    # Créer le contrôleur principal
    master_controller = MasterController(session)

    # Démarrer l'application
    master_controller.run()

    return app.exec()


if __name__ == "__main__":
    sys.exit(run())
