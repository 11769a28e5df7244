import logging

import flet as ft

from neoncgpa.config.settings import settings
from neoncgpa.ui.app import main


def run() -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # FilePicker only yields local paths in the desktop view.
    ft.app(target=main, view=ft.AppView.FLET_APP)


if __name__ == "__main__":
    run()
