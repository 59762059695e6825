"""
CLI interface for the ontology repository audit.

Usage:
    python -m ontology_audit.main report                          # Full sanity report
    python -m ontology_audit.main report --ontologies GO,NCIT     # Subset of ontologies
    python -m ontology_audit.main report --output report.json     # Custom output file
    python -m ontology_audit.main reconcile --dry-run --log-all   # Show upload path fixes
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .clients.index import AnnotatorClient, SolrSearchClient
from .config import AuditConfig, get_default_config
from .core.context import AuditContext
from .core.errors import AuditError, LockUnavailableError
from .locking import RunLock
from .orchestrator import ReportRunner
from .reconcile import UploadReconciler
from .reports.generator import JsonReportSink, print_summary
from .sources.sparql import SparqlEntitySource


logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False, log_file: Optional[str] = None):
    """Настроить логирование в консоль и, при необходимости, в файл."""
    level = logging.DEBUG if verbose else logging.INFO
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True,
    )


def parse_acronyms(raw: Optional[str]) -> Optional[List[str]]:
    """Разобрать список акронимов через запятую; None означает все онтологии."""
    if raw is None:
        return None
    return [item.strip() for item in raw.split(",") if item.strip()]


def parse_args(argv: Optional[List[str]] = None):
    """Парсинг аргументов командной строки."""
    parser = argparse.ArgumentParser(
        description='Ontology repository audit tools',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Sanity report over every ontology
  python -m ontology_audit.main report

  # Report on a few ontologies, written to a custom file
  python -m ontology_audit.main report --ontologies GO,NCIT --output go_ncit.json

  # Show which upload paths would be fixed
  python -m ontology_audit.main reconcile --dry-run --log-all
        """
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        '--ontologies',
        type=str,
        help='Comma-separated acronyms to process (default: all ontologies)'
    )
    common.add_argument(
        '--log-file',
        type=str,
        help='Also write logs to this file'
    )
    common.add_argument(
        '--verbose',
        '-v',
        action='store_true',
        help='Verbose output'
    )

    report = subparsers.add_parser('report', parents=[common], help='Generate the ontologies sanity report')
    report.add_argument(
        '--output',
        type=str,
        help='Report file path (default: REPORT_PATH from the environment)'
    )
    report.add_argument(
        '--no-summary',
        action='store_true',
        help='Skip printing summary to console'
    )
    report.add_argument(
        '--no-lock',
        action='store_true',
        help='Run even without taking the redis run lock'
    )

    reconcile = subparsers.add_parser('reconcile', parents=[common], help='Reconcile recorded upload file paths')
    reconcile.add_argument(
        '--dry-run',
        action='store_true',
        help='Only log what would change'
    )
    reconcile.add_argument(
        '--log-all',
        action='store_true',
        help='Also log submissions that are already consistent'
    )

    args = parser.parse_args(argv)
    if args.ontologies is not None and not parse_acronyms(args.ontologies):
        parser.error("--ontologies needs at least one acronym")
    return args


def build_context(config: AuditConfig) -> AuditContext:
    """Собрать хранилище и клиенты индексов из конфигурации."""
    return AuditContext(
        config=config,
        source=SparqlEntitySource.from_config(config),
        annotator=AnnotatorClient.from_config(config),
        search=SolrSearchClient.from_config(config),
        stop_words=config.load_stop_words(),
    )


async def close_context(context: AuditContext):
    """Закрыть все соединения контекста."""
    for resource in (context.source, context.annotator, context.search):
        if resource is None:
            continue
        try:
            await resource.close()
        except Exception as e:
            logger.warning(f"Error closing {resource}: {e}")


async def run_report(args, config: AuditConfig) -> int:
    """Сгенерировать sanity-отчёт."""
    output = Path(args.output) if args.output else config.report_path
    context = build_context(config)
    runner = ReportRunner(context, sink=JsonReportSink(output))
    lock = None if args.no_lock else RunLock.from_config(config)

    try:
        if lock is not None:
            async with lock:
                report = await runner.run(parse_acronyms(args.ontologies))
        else:
            report = await runner.run(parse_acronyms(args.ontologies))
    finally:
        await close_context(context)

    if not args.no_summary:
        print_summary(report)
    return 0


async def run_reconcile(args, config: AuditConfig) -> int:
    """Сверить пути загруженных файлов."""
    context = AuditContext(
        config=config,
        source=SparqlEntitySource.from_config(config),
        dry_run=args.dry_run,
    )
    reconciler = UploadReconciler.from_context(context, log_all=args.log_all)
    try:
        await reconciler.run(parse_acronyms(args.ontologies))
    finally:
        await close_context(context)
    return 0


async def main(argv: Optional[List[str]] = None) -> int:
    """Главная точка входа."""
    args = parse_args(argv)
    setup_logging(args.verbose, args.log_file)

    env_path = Path.cwd() / '.env'
    if env_path.exists():
        load_dotenv(env_path)

    config = get_default_config()

    try:
        if args.command == 'report':
            return await run_report(args, config)
        return await run_reconcile(args, config)
    except LockUnavailableError as e:
        logger.warning(f"{e}; not running")
        return 1
    except AuditError as e:
        logger.error(f"Aborted: {e}")
        return 1
    except Exception as e:
        logger.error(f"Run failed with error: {e}", exc_info=True)
        return 1


def run():
    """Точка входа console script."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.warning("Interrupted by user, no report written")
        sys.exit(1)


if __name__ == "__main__":
    run()
