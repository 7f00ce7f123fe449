"""
Main Entry Point for Roster Viewer

Sets up logging and the global exception hook, then runs the main window.
"""

import sys
import logging
import traceback
from pathlib import Path
from datetime import datetime
from tkinter import messagebox

from roster_viewer.roster_logic import RosterLoader, RosterState
from roster_viewer.settings import AppSettings
from roster_viewer.ui import MainWindow


def setup_logging(log_dir: str = "logs"):
    """Setup application logging"""
    log_path = Path(log_dir)
    log_path.mkdir(exist_ok=True)

    log_file = log_path / f"roster_viewer_{datetime.now().strftime('%Y%m%d')}.log"

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file, encoding='utf-8'),
            logging.StreamHandler(sys.stdout)
        ]
    )

    return logging.getLogger(__name__)


def handle_exception(exc_type, exc_value, exc_traceback):
    """Global exception handler"""
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return

    logger = logging.getLogger(__name__)
    logger.error(
        "Uncaught exception",
        exc_info=(exc_type, exc_value, exc_traceback)
    )

    # Show error dialog if GUI is available
    try:
        error_msg = f"An unexpected error occurred:\n\n{exc_type.__name__}: {exc_value}"
        messagebox.showerror("Application Error", error_msg)
    except Exception:
        pass


class RosterViewerApp:
    """Main application class"""

    def __init__(self, settings: AppSettings = None):
        self.logger = logging.getLogger(__name__)
        self.settings = settings or AppSettings()
        self.main_window = None

    def run(self):
        """Run the main application"""
        try:
            loader = RosterLoader(self.settings)
            self.main_window = MainWindow(
                settings=self.settings,
                loader=loader,
                roster_state=RosterState()
            )
            # Tk callback errors go through the same handler as everything else
            self.main_window.report_callback_exception = handle_exception

            self.logger.info("Starting GUI application")
            self.main_window.mainloop()

            self.logger.info("Application closed normally")
            return True

        except Exception as e:
            self.logger.error(f"Application error: {e}")
            self.logger.error(traceback.format_exc())
            self.show_runtime_error(e)
            return False

    def show_runtime_error(self, error):
        """Show runtime error dialog"""
        try:
            error_msg = f"""
An error occurred while running the application:

{type(error).__name__}: {str(error)}

The application will now close. Please check the log files
for more detailed information.
            """
            messagebox.showerror("Runtime Error", error_msg.strip())

        except Exception as e:
            print(f"Failed to show runtime error: {e}")


def main():
    """Main entry point"""
    sys.excepthook = handle_exception

    settings = AppSettings()
    logger = setup_logging(settings.log_dir)
    logger.info("=" * 50)
    logger.info("Starting Roster Viewer")
    logger.info("=" * 50)

    app = RosterViewerApp(settings)
    success = app.run()

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
