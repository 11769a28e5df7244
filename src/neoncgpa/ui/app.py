from __future__ import annotations

import logging
from typing import Callable

import flet as ft

from neoncgpa.config.settings import settings
from neoncgpa.core.gpa import semester_stats, subject_grade_point
from neoncgpa.core.grades import GRADE_CHOICES
from neoncgpa.services.snapshot import SnapshotError
from neoncgpa.services.storage import SnapshotStore
from neoncgpa.services.transfer import read_import, write_export
from neoncgpa.state.app_state import AppState
from neoncgpa.state.session_state import (
    Semester,
    Session,
    Subject,
    add_semester,
    add_subject,
    remove_semester,
    remove_subject,
    update_subject,
)
from neoncgpa.ui.trend_chart import build_trend_chart

logger = logging.getLogger(__name__)


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:g}"


def _text_value(value) -> str:
    return "" if value is None else str(value)


class NeonCgpaApp:
    def __init__(self, page: ft.Page, state: AppState) -> None:
        self.page = page
        self.page.title = "Neon CGPA"
        self.page.scroll = ft.ScrollMode.AUTO
        self.page.theme_mode = ft.ThemeMode.DARK
        self.state = state
        self.state.listeners.append(lambda _: self.refresh())

        self.cgpa_text = ft.Text("0.00", size=36, weight=ft.FontWeight.BOLD, color=ft.Colors.CYAN_300)
        self.percent_text = ft.Text("0.00%", size=18)
        self.chart_container = ft.Container()
        self.semesters_column = ft.Column(spacing=16)

        self.import_picker = ft.FilePicker(on_result=self.handle_import_result)
        self.export_picker = ft.FilePicker(on_result=self.handle_export_result)
        self.page.overlay.extend([self.import_picker, self.export_picker])

    def run(self) -> None:
        self.page.add(
            ft.Row(
                [
                    ft.Text("NEON CGPA", size=28, weight=ft.FontWeight.BOLD),
                    ft.Row(
                        [
                            ft.OutlinedButton("Import", on_click=self.handle_import),
                            ft.OutlinedButton("Export", on_click=self.handle_export),
                            ft.TextButton("Reset", on_click=self.confirm_reset),
                        ]
                    ),
                ],
                alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
            ),
            ft.Row(
                [
                    ft.Column([ft.Text("CGPA"), self.cgpa_text]),
                    ft.Column([ft.Text("PERCENTAGE"), self.percent_text]),
                    self.chart_container,
                ],
                spacing=32,
            ),
            ft.Divider(),
            self.semesters_column,
            ft.ElevatedButton("+ ADD SEMESTER", on_click=lambda _: self.state.apply(add_semester)),
        )
        self.refresh()

    # --- rendering ---

    def refresh(self) -> None:
        overall = self.state.overall
        self.cgpa_text.value = f"{overall.cgpa:.2f}"
        self.percent_text.value = f"{overall.percent:.2f}%"
        self.chart_container.content = build_trend_chart(self.state.trend)
        self.semesters_column.controls = [self.semester_card(sem) for sem in self.state.session.semesters]
        self.page.update()

    def semester_card(self, semester: Semester) -> ft.Control:
        stats = semester_stats(semester)
        header = ft.Row(
            [
                ft.Text(f"SEMESTER {semester.id:02d}", size=20, weight=ft.FontWeight.BOLD),
                ft.Row(
                    [
                        ft.Text(f"GPA: {stats.gpa:.2f}"),
                        ft.Text(f"CREDITS: {_format_number(stats.credits)}"),
                        ft.IconButton(
                            icon=ft.Icons.CLOSE,
                            tooltip="Delete semester",
                            on_click=lambda _, sid=semester.id: self.confirm_remove_semester(sid),
                        ),
                    ]
                ),
            ],
            alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
        )
        column_titles = ft.Row(
            [
                ft.Text("Subject Name", width=220),
                ft.Text("Credits", width=90),
                ft.Text("Grade", width=110),
                ft.Text("Marks", width=90),
                ft.Text("FR", width=50),
                ft.Text("GP", width=40),
            ]
        )
        return ft.Card(
            content=ft.Container(
                padding=16,
                content=ft.Column(
                    [
                        header,
                        column_titles,
                        *[self.subject_row(semester.id, sub) for sub in semester.subjects],
                        ft.TextButton(
                            "+ ADD SUBJECT",
                            on_click=lambda _, sid=semester.id: self.state.apply(add_subject, sid),
                        ),
                    ]
                ),
            )
        )

    def subject_row(self, semester_id: int, subject: Subject) -> ft.Control:
        result = subject_grade_point(subject)

        def on_edit(field_name: str) -> Callable[[ft.ControlEvent], None]:
            def handler(e: ft.ControlEvent) -> None:
                self.state.apply(update_subject, semester_id, subject.id, field_name, e.control.value)

            return handler

        return ft.Row(
            [
                ft.TextField(value=subject.name, hint_text="Subject Name", width=220, dense=True, on_blur=on_edit("name")),
                ft.TextField(
                    value=_text_value(subject.credits),
                    width=90,
                    dense=True,
                    keyboard_type=ft.KeyboardType.NUMBER,
                    on_blur=on_edit("credits"),
                ),
                ft.Dropdown(
                    value=subject.grade,
                    width=110,
                    dense=True,
                    options=[ft.dropdown.Option(g, g or "-") for g in GRADE_CHOICES],
                    on_change=on_edit("grade"),
                ),
                ft.TextField(
                    value=_text_value(subject.marks),
                    hint_text="Marks",
                    width=90,
                    dense=True,
                    keyboard_type=ft.KeyboardType.NUMBER,
                    on_blur=on_edit("marks"),
                ),
                ft.Checkbox(value=subject.is_fr, width=50, on_change=on_edit("is_fr")),
                ft.Text("-" if result.gp is None else _format_number(result.gp), width=40),
                ft.IconButton(
                    icon=ft.Icons.DELETE,
                    on_click=lambda _, sid=subject.id: self.state.apply(remove_subject, semester_id, sid),
                ),
            ]
        )

    # --- actions ---

    def notify(self, message: str) -> None:
        self.page.open(ft.SnackBar(ft.Text(message)))

    def confirm(self, title: str, on_confirm: Callable[[], None]) -> None:
        dialog = ft.AlertDialog(modal=True, title=ft.Text(title))

        def close(confirmed: bool) -> None:
            self.page.close(dialog)
            if confirmed:
                on_confirm()

        dialog.actions = [
            ft.TextButton("Cancel", on_click=lambda _: close(False)),
            ft.TextButton("Confirm", on_click=lambda _: close(True)),
        ]
        self.page.open(dialog)

    def confirm_remove_semester(self, semester_id: int) -> None:
        self.confirm("Delete Semester?", lambda: self.state.apply(remove_semester, semester_id))

    def confirm_reset(self, _: ft.ControlEvent) -> None:
        self.confirm("HARD RESET: This will wipe all data. Confirm?", self.state.reset)

    def handle_import(self, _: ft.ControlEvent) -> None:
        self.import_picker.pick_files(allow_multiple=False, allowed_extensions=["json"])

    def handle_import_result(self, e: ft.FilePickerResultEvent) -> None:
        if not e.files:
            return
        path = e.files[0].path
        try:
            if not path:
                raise SnapshotError("File picker returned no local path")
            session: Session = read_import(path)
        except SnapshotError as exc:
            logger.warning("Import failed: %s", exc)
            self.notify("Invalid File")
            return
        self.state.replace(session)

    def handle_export(self, _: ft.ControlEvent) -> None:
        self.export_picker.save_file(file_name=settings.export_filename, allowed_extensions=["json"])

    def handle_export_result(self, e: ft.FilePickerResultEvent) -> None:
        if not e.path:
            return
        try:
            write_export(self.state.session, e.path)
        except OSError as exc:
            logger.error("Export failed: %s", exc)
            self.notify(f"Export failed: {exc}")
            return
        self.notify(f"Saved {e.path}")


def main(page: ft.Page) -> None:
    state = AppState.load(SnapshotStore.from_settings())
    NeonCgpaApp(page, state).run()
