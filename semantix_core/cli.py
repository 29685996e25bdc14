#!/usr/bin/env python3
"""
Semantix Engine CLI - Command line interface for the vector search engine.

Usage:
    semantix-engine add --id=ID --vector=VECTOR [--title=TITLE] [--meta=PAIRS] [--store=FILE]
    semantix-engine list [--store=FILE]
    semantix-engine delete ID [--store=FILE]
    semantix-engine search --vector=VECTOR [--top=N] [--store=FILE]
    semantix-engine export --output=FILE [--store=FILE]
    semantix-engine import --file=FILE [--store=FILE]
    semantix-engine shell
    semantix-engine config show [--section=SECTION]
    semantix-engine config validate
    semantix-engine version
    semantix-engine --help

Commands:
    add                 Add or replace a document
    list                List stored documents
    delete              Delete a document by id
    search              Find the documents most similar to a vector
    export              Write all documents to a JSON file
    import              Load documents from a JSON file
    shell               Interactive menu over an in-memory index
    config              Show or validate configuration
    version             Show version information

Options:
    -h --help           Show this help message
    --store=FILE        JSON data file holding the documents [default: configured data path]
    --id=ID             Document id
    --title=TITLE       Document title
    --vector=VECTOR     Comma-separated floats, e.g. 0.1,0.2,0.3
    --meta=PAIRS        Comma-separated key=value metadata pairs
    --top=N             Number of results [default: configured default_top_n]
    --output=FILE       Output file path
    --file=FILE         Input file path
    --section=SECTION   Configuration section
    --config=DIR        Configuration directory
"""

import asyncio
import os
import sys
import traceback
from pathlib import Path
from typing import Callable, Dict, List, Optional

import dotenv
import yaml

from semantix_core import __version__
from semantix_core.config.config_manager import ConfigManager, get_config, init_config
from semantix_core.exceptions import (
    ConfigValidationError,
    SemantixError,
)
from semantix_core.index.vector_index import VectorIndex
from semantix_core.model.vector_document import VectorDocument
from semantix_core.monitoring.structured_logger import LoggingContext, configure_logging

MENU = "\n1) Add Document\n2) List Documents\n3) Delete Document\n4) Search\n5) Export\n6) Import\n0) Exit"


def parse_vector(text: str) -> List[float]:
    """
    Parse a comma-separated list of floats.

    Raises:
        ValueError: If the text is empty or a component is not a number
    """
    if text is None or not str(text).strip():
        raise ValueError("Vector is empty")
    values = []
    for part in str(text).split(","):
        part = part.strip()
        try:
            values.append(float(part))
        except ValueError:
            raise ValueError(f"Invalid vector component: '{part}'") from None
    return values


def parse_metadata(text: Optional[str]) -> Dict[str, str]:
    """Parse 'key=value,key2=value2' into a dict."""
    metadata: Dict[str, str] = {}
    if not text or text is True:
        return metadata
    for pair in str(text).split(","):
        if not pair.strip():
            continue
        if "=" not in pair:
            raise ValueError(f"Invalid metadata pair: '{pair}' (expected key=value)")
        key, value = pair.split("=", 1)
        metadata[key.strip()] = value.strip()
    return metadata


class SemantixEngineCLI:
    """Semantix engine command line interface."""

    def __init__(self, output: Callable[[str], None] = print):
        self.config_manager: Optional[ConfigManager] = None
        self.index: Optional[VectorIndex] = None
        self.output = output

    def initialize(self, config_dir: Optional[str] = None):
        """Load configuration and logging, then create an empty index."""
        dotenv.load_dotenv()
        self.config_manager = init_config(config_dir) if config_dir else get_config()

        logging_config = self.config_manager.config.logging
        configure_logging(
            log_level=logging_config.level.value,
            json_format=logging_config.json_format,
            log_format=logging_config.format,
        )
        self.index = VectorIndex.from_config(self.config_manager)

    def _store_path(self, store: Optional[str]) -> Path:
        if store and store is not True:
            return Path(store)
        return Path(self.config_manager.config.persistence.data_path)

    async def _load_store(self, store: Optional[str]) -> Path:
        path = self._store_path(store)
        if path.exists():
            await self.index.import_file_async(path)
        return path

    def _fail(self, message: str):
        self.output(f"❌ {message}")
        sys.exit(1)

    async def add_command(
        self,
        doc_id: str,
        vector: str,
        title: str = "",
        meta: Optional[str] = None,
        store: Optional[str] = None,
    ):
        """Add or replace a document in the data file."""
        try:
            path = await self._load_store(store)
            doc = VectorDocument(
                doc_id=doc_id,
                title=title or "",
                metadata=parse_metadata(meta),
                vector=parse_vector(vector),
            )
            inserted = self.index.add(doc)
            await self.index.export_async(path)
        except (SemantixError, ValueError) as e:
            self._fail(f"Add failed: {e}")

        self.output(f"✅ Document {'added' if inserted else 'replaced'}: {doc_id}")

    async def list_command(self, store: Optional[str] = None):
        """List documents in the data file."""
        try:
            await self._load_store(store)
        except SemantixError as e:
            self._fail(f"List failed: {e}")

        self._print_documents(self.index.get_all())

    async def delete_command(self, doc_id: str, store: Optional[str] = None):
        """Delete a document from the data file."""
        try:
            path = await self._load_store(store)
            removed = self.index.delete(doc_id)
            if removed:
                await self.index.export_async(path)
        except SemantixError as e:
            self._fail(f"Delete failed: {e}")

        self.output("✅ Deleted." if removed else "⚠️  Not found.")

    async def search_command(self, vector: str, top: Optional[str] = None, store: Optional[str] = None):
        """Search the data file for the most similar documents."""
        try:
            top_n = int(top) if top not in (None, True) else self.config_manager.config.search.default_top_n
            await self._load_store(store)
            results = self.index.search(parse_vector(vector), top_n)
        except (SemantixError, ValueError) as e:
            self._fail(f"Search failed: {e}")

        self._print_results(results)

    async def export_command(self, output: str, store: Optional[str] = None):
        """Export the data file's documents to another JSON file."""
        self.output(f"📤 Exporting documents to {output}...")
        try:
            await self._load_store(store)
            count = await self.index.export_async(output)
        except SemantixError as e:
            self._fail(f"Export failed: {e}")

        self.output(f"✅ Export completed: {count} documents")

    async def import_command(self, file: str, store: Optional[str] = None):
        """Merge documents from a JSON file into the data file."""
        self.output(f"📥 Importing documents from {file}...")
        try:
            path = await self._load_store(store)
            count = await self.index.import_file_async(file)
            await self.index.export_async(path)
        except SemantixError as e:
            self._fail(f"Import failed: {e}")

        self.output(f"✅ Import completed: {count} documents")

    def shell_command(self, input_func: Callable[[str], str] = input):
        """Interactive menu over a single in-memory index."""
        self.output("=== Semantix Engine ===")
        while True:
            self.output(MENU)
            try:
                choice = input_func("Select option: ").strip()
            except EOFError:
                return

            if choice == "0":
                return

            action = {
                "1": self._shell_add,
                "2": self._shell_list,
                "3": self._shell_delete,
                "4": self._shell_search,
                "5": self._shell_export,
                "6": self._shell_import,
            }.get(choice)

            if action is None:
                self.output("Invalid choice.")
                continue

            try:
                action(input_func)
            except EOFError:
                return
            except (SemantixError, ValueError) as e:
                self.output(f"❌ {e}")

    def _shell_add(self, input_func):
        doc_id = input_func("ID: ").strip()
        title = input_func("Title: ").strip()
        vector = parse_vector(input_func("Vector (comma-separated floats): "))
        self.index.add(VectorDocument(doc_id=doc_id, title=title, vector=vector))
        self.output("Document added.")

    def _shell_list(self, input_func):
        self._print_documents(self.index.get_all())

    def _shell_delete(self, input_func):
        removed = self.index.delete(input_func("ID to delete: ").strip())
        self.output("Deleted." if removed else "Not found.")

    def _shell_search(self, input_func):
        vector = parse_vector(input_func("Vector (comma-separated floats): "))
        text = input_func("Top N: ").strip()
        try:
            top_n = int(text)
        except ValueError:
            raise ValueError(f"Top N must be an integer, got '{text}'") from None
        self._print_results(self.index.search(vector, top_n))

    def _shell_export(self, input_func):
        self.index.export(input_func("Export path: ").strip())
        self.output("Export completed.")

    def _shell_import(self, input_func):
        self.index.import_file(input_func("Import path: ").strip())
        self.output("Import completed.")

    def _print_documents(self, documents: List[VectorDocument]):
        if not documents:
            self.output("No documents.")
            return
        self.output("Stored Documents:")
        for doc in sorted(documents, key=lambda d: d.doc_id):
            self.output(f"- {doc.doc_id}: {doc.title}")

    def _print_results(self, results):
        self.output("\nResults:")
        if not results:
            self.output("No results.")
        for doc, score in results:
            self.output(f"{doc.doc_id}: {doc.title} (Score: {score:.4f})")

    def config_command(self, action: str, section: Optional[str] = None):
        """Show or validate configuration."""
        if action == "show":
            data = self.config_manager.to_dict()
            if section and section is not True:
                if section not in data:
                    self._fail(f"Unknown configuration section: {section}")
                data = {section: data[section]}
            self.output(yaml.dump(data, default_flow_style=False, indent=2).rstrip())
        elif action == "validate":
            try:
                self.config_manager.reload_configuration()
            except ConfigValidationError as e:
                self._fail(str(e))
            self.output("✅ Configuration is valid")
        else:
            self._fail(f"Unknown config action: {action}")

    def version_command(self):
        self.output(f"Semantix Engine v{__version__}")


def parse_args(argv: Optional[List[str]] = None):
    """Parse command line arguments manually."""
    argv = sys.argv[1:] if argv is None else argv

    if len(argv) < 1:
        print(__doc__)
        sys.exit(1)

    command = argv[0]
    args = {}

    i = 1
    while i < len(argv):
        arg = argv[i]

        if arg.startswith("--"):
            if "=" in arg:
                key, value = arg[2:].split("=", 1)
                args[key] = value
            else:
                key = arg[2:]
                if i + 1 < len(argv) and not argv[i + 1].startswith("--"):
                    args[key] = argv[i + 1]
                    i += 1
                else:
                    args[key] = True
        else:
            args.setdefault("positional", []).append(arg)

        i += 1

    return command, args


async def run(argv: Optional[List[str]] = None):
    """Dispatch a single CLI invocation."""
    command, args = parse_args(argv)

    if command in ["--help", "-h", "help"]:
        print(__doc__)
        return

    cli = SemantixEngineCLI()
    cli.initialize(args.get("config"))
    store = args.get("store")

    with LoggingContext(request_id=command):
        if command == "add":
            if "id" not in args or "vector" not in args:
                cli._fail("Add requires --id and --vector arguments")
            await cli.add_command(
                doc_id=args["id"],
                vector=args["vector"],
                title=args.get("title", ""),
                meta=args.get("meta"),
                store=store,
            )

        elif command == "list":
            await cli.list_command(store=store)

        elif command == "delete":
            doc_id = (args.get("positional") or [args.get("id")])[0]
            if not doc_id or doc_id is True:
                cli._fail("Delete requires a document id")
            await cli.delete_command(doc_id, store=store)

        elif command == "search":
            if "vector" not in args:
                cli._fail("Search requires --vector argument")
            await cli.search_command(vector=args["vector"], top=args.get("top"), store=store)

        elif command == "export":
            if "output" not in args:
                cli._fail("Export requires --output argument")
            await cli.export_command(output=args["output"], store=store)

        elif command == "import":
            if "file" not in args:
                cli._fail("Import requires --file argument")
            await cli.import_command(file=args["file"], store=store)

        elif command == "shell":
            cli.shell_command()

        elif command == "config":
            if not args.get("positional"):
                cli._fail("Config command requires action (show, validate)")
            cli.config_command(args["positional"][0], section=args.get("section"))

        elif command == "version":
            cli.version_command()

        else:
            cli._fail(f"Unknown command: {command}\nRun 'semantix-engine --help' for usage information")


def main():
    """Main CLI entry point."""
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        print("\n🛑 Operation cancelled")
        sys.exit(1)
    except SemantixError as e:
        print(f"❌ Error: {e}")
        if os.getenv("SEMANTIX_DEBUG"):
            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
