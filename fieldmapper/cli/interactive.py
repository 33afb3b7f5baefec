"""Interactive terminal editor for a mapping session."""
from pathlib import Path
from typing import List, Optional

import click
from colorama import Fore, Style

from config import app_config
from fieldmapper.cli.session import Command, MappingSession
from fieldmapper.mapper.errors import DuplicateAssociation, MappingError
from fieldmapper.schema.models import Field, Side


class InteractiveCLI:
    """Interactive CLI interface. Renders only from the session view."""

    MENU = [
        ("a", "Auto-map"),
        ("c", "Create connection"),
        ("r", "Remove field from connection"),
        ("u", "Undo"),
        ("y", "Redo"),
        ("x", "Clear all"),
        ("s", "Export summary JSON"),
        ("e", "Export mapping document"),
        ("q", "Quit"),
    ]

    def __init__(self, session: MappingSession, output_dir: Optional[str] = None):
        """Initialize CLI."""
        self.session = session
        self.output_dir = Path(output_dir or app_config.output_dir)
        self.dto_fields: List[Field] = list(session.catalog.iter_source())
        self.dao_fields: List[Field] = list(session.catalog.target)

    def print_header(self, title: str):
        """Print a section header."""
        print(f"\n{Fore.CYAN}{'━' * 45}")
        print(f"{Fore.CYAN}{title}")
        print(f"{Fore.CYAN}{'━' * 45}{Style.RESET_ALL}\n")

    def run(self):
        """Run the editing loop."""
        while True:
            self.render()
            self.print_header("Actions")
            for key, label in self.MENU:
                click.echo(f"{key}. {label}")

            choice = click.prompt("\nChoose", default="q").strip().lower()

            if choice == "q":
                click.echo(f"{Fore.YELLOW}Goodbye!")
                break

            try:
                self.dispatch(choice)
            except DuplicateAssociation as e:
                click.echo(f"{Fore.YELLOW}⚠️  {e}")
            except MappingError as e:
                click.echo(f"{Fore.RED}❌ {e}")

    def dispatch(self, choice: str):
        """Run one menu choice."""
        if choice == "a":
            created = self.session.handle(Command.AUTO_MAP)
            click.echo(f"{Fore.GREEN}✅ Auto-mapped {len(created)} fields")
        elif choice == "c":
            self._create()
        elif choice == "r":
            self._remove()
        elif choice == "u":
            if not self.session.handle(Command.UNDO):
                click.echo(f"{Fore.YELLOW}Nothing to undo")
        elif choice == "y":
            if not self.session.handle(Command.REDO):
                click.echo(f"{Fore.YELLOW}Nothing to redo")
        elif choice == "x":
            if click.confirm("Remove all connections?", default=False):
                self.session.handle(Command.CLEAR)
        elif choice == "s":
            self._export(Command.EXPORT_SUMMARY, "mapping_summary.json")
        elif choice == "e":
            self._export(Command.EXPORT_DOCUMENT, "mapping_document.json")
        else:
            click.echo(f"{Fore.RED}Invalid choice")

    def render(self):
        """Print both catalogs with mapped status, then the connections."""
        view = self.session.view()
        mapped_sources = {f for a in view.associations for f in a.source_fields}
        mapped_targets = {f for a in view.associations for f in a.target_fields}

        self.print_header("DTO Fields")
        current_class = None
        for i, f in enumerate(self.dto_fields, 1):
            if f.owner_class != current_class:
                current_class = f.owner_class
                click.echo(f"{Fore.CYAN}{current_class}")
            icon = f"{Fore.GREEN}✓" if f.id in mapped_sources else " "
            click.echo(f"  {i:3d}. {icon} {f.name}{Style.RESET_ALL} ({f.type})")

        self.print_header("DAO Fields")
        for i, f in enumerate(self.dao_fields, 1):
            icon = f"{Fore.GREEN}✓" if f.id in mapped_targets else " "
            click.echo(f"  {i:3d}. {icon} {f.name}{Style.RESET_ALL} ({f.type}) from {f.owner_class}")

        self.print_header(f"Connections ({len(view.associations)})")
        for i, association in enumerate(view.associations, 1):
            sources = ", ".join(str(f) for f in association.source_fields)
            targets = ", ".join(str(f) for f in association.target_fields)
            click.echo(f"  {i:3d}. [{association.cardinality.value}] {sources} → {targets}")
            for warning in association.warnings:
                click.echo(f"       {Fore.YELLOW}⚠️  {warning}")

        status = []
        if view.can_undo:
            status.append("undo")
        if view.can_redo:
            status.append("redo")
        if status:
            click.echo(f"\n{Fore.CYAN}Available: {', '.join(status)}")

    def _pick(self, label: str, fields: List[Field]) -> List[Field]:
        raw = click.prompt(f"{label} numbers (comma separated)", default="", show_default=False)
        picked = []
        for part in raw.split(","):
            part = part.strip()
            if not part:
                continue
            if not part.isdigit() or not 1 <= int(part) <= len(fields):
                click.echo(f"{Fore.RED}Ignoring invalid number: {part}")
                continue
            picked.append(fields[int(part) - 1])
        return picked

    def _create(self):
        sources = self._pick("DTO", self.dto_fields)
        targets = self._pick("DAO", self.dao_fields)

        association = self.session.handle(
            Command.CREATE,
            source_ids=[f.id for f in sources],
            target_ids=[f.id for f in targets],
        )
        click.echo(f"{Fore.GREEN}✅ Created {association.cardinality.value} connection")
        for warning in association.warnings:
            click.echo(f"{Fore.YELLOW}⚠️  {warning}")

    def _remove(self):
        associations = self.session.view().associations
        if not associations:
            click.echo(f"{Fore.YELLOW}No connections")
            return

        number = click.prompt("Connection number", type=click.IntRange(1, len(associations)))
        association = associations[number - 1]
        side = Side(click.prompt("Side", type=click.Choice([s.value for s in Side]), default=Side.SOURCE.value))

        members = association.members(side)
        for i, field_id in enumerate(members, 1):
            click.echo(f"  {i}. {field_id}")
        index = click.prompt("Field number", type=click.IntRange(1, len(members)))

        result = self.session.handle(
            Command.REMOVE_FIELD,
            association_id=association.id,
            side=side,
            field_id=members[index - 1],
        )
        if result is None:
            click.echo(f"{Fore.GREEN}Connection removed")
        else:
            click.echo(f"{Fore.GREEN}Connection is now {result.cardinality.value}")

    def _export(self, command: Command, file_name: str):
        data = self.session.handle(command)
        output_file = self.session.exporter.export(self.output_dir / file_name, data)
        click.echo(f"{Fore.GREEN}✅ Exported to {output_file}")
