"""CLI 진입점

명령행 인터페이스를 통한 커밋 추출 실행을 제공합니다.
"""

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

from tqdm import tqdm

from .config.settings import (
    ExtractorConfig,
    build_config,
    load_config_file,
    merge_config,
    resolve_log_level,
)
from .errors import CommitExtractorError
from .runner import run_extraction


def setup_logging(level: str = "INFO",
                  fmt: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s") -> None:
    """로깅 설정

    Args:
        level: 로그 레벨
        fmt: 로그 포맷
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=fmt,
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True
    )


def build_parser() -> argparse.ArgumentParser:
    """인자 파서 생성"""
    parser = argparse.ArgumentParser(
        prog="commit-extractor",
        description="Extract data from a Git repository.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
사용 예시:
  commit-extractor --repository . --output commits.csv --extensions rs --size 100
  commit-extractor --repository . --output out.json --extensions py,pyi --size 10 \\
      --message-len-min 8 --message-len-max 64 --changes-len-max 1024
  commit-extractor --config extractor.yml --size 500 --show-progress
        """
    )

    parser.add_argument("--repository", type=str, help="Path to the Git repository")
    parser.add_argument("--output", type=str, help="Path to the output file")
    parser.add_argument(
        "--extensions",
        type=str,
        help="List of file extensions (comma-separated, leading dot optional)"
    )
    parser.add_argument("--size", type=int, help="Size of the dataset (number of accepted commits)")
    parser.add_argument("--message-len-min", type=int, help="Minimum commit message length")
    parser.add_argument("--message-len-max", type=int, help="Maximum commit message length")
    parser.add_argument("--changes-len-min", type=int, help="Minimum commit changes length")
    parser.add_argument("--changes-len-max", type=int, help="Maximum commit changes length")
    parser.add_argument(
        "--message-mode",
        choices=["full", "summary"],
        help="Measure the whole stripped message (full) or its first line (summary)"
    )
    parser.add_argument(
        "--only-target-extensions",
        action="store_true",
        default=None,
        help="Skip commits that also change files with other extensions"
    )
    parser.add_argument(
        "--exclude-bots",
        action="store_true",
        default=None,
        help="Skip commits whose author name indicates a bot"
    )
    parser.add_argument(
        "--exclude-merge-messages",
        action="store_true",
        default=None,
        help="Skip commits whose message indicates a merge"
    )
    parser.add_argument(
        "--include-changes",
        action="store_true",
        default=None,
        help="Add the patch of matching files as a 'changes' column"
    )
    parser.add_argument(
        "--format",
        choices=["csv", "json"],
        help="Output format (default: inferred from the output file name, csv otherwise)"
    )
    parser.add_argument(
        "--show-progress",
        action="store_true",
        default=None,
        help="Show progress bar"
    )
    parser.add_argument("--config", "-c", type=str, help="YAML config file")
    parser.add_argument(
        "--log-level", "-l",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="로그 레벨 (기본값: COMMIT_EXTRACTOR_LOG_LEVEL 환경 변수 또는 INFO)"
    )
    return parser


def _overrides_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    """CLI 인자를 설정 딕셔너리 형태로 변환 (지정하지 않은 값은 None)"""
    return {
        "repository": args.repository,
        "filters": {
            "extensions": args.extensions,
            "size": args.size,
            "message_length_min": args.message_len_min,
            "message_length_max": args.message_len_max,
            "changes_length_min": args.changes_len_min,
            "changes_length_max": args.changes_len_max,
            "message_mode": args.message_mode,
            "only_target_extensions": args.only_target_extensions,
            "exclude_bots": args.exclude_bots,
            "exclude_merge_messages": args.exclude_merge_messages,
        },
        "output": {
            "path": args.output,
            "format": args.format,
            "include_changes": args.include_changes,
        },
        "show_progress": args.show_progress,
    }


def resolve_config(args: argparse.Namespace, file_data: Dict[str, Any]) -> ExtractorConfig:
    """설정 파일과 CLI 인자를 병합하여 검증된 설정 생성

    Raises:
        ConfigError: 설정 검증에 실패한 경우
    """
    data = merge_config(file_data, _overrides_from_args(args))

    output = data.get("output")
    if isinstance(output, dict) and not output.get("format"):
        path = str(output.get("path") or "")
        output["format"] = "json" if path.lower().endswith(".json") else "csv"

    return build_config(data)


def main(argv: Optional[List[str]] = None) -> None:
    """메인 함수"""
    parser = build_parser()
    args = parser.parse_args(argv)

    log_level = resolve_log_level(args.log_level)
    setup_logging(log_level)

    try:
        file_data = load_config_file(args.config) if args.config else {}

        file_logging = file_data.get("logging") or {}
        if isinstance(file_logging, dict) and file_logging:
            log_level = resolve_log_level(args.log_level, file_logging.get("level"))
            setup_logging(log_level, file_logging.get("format") or
                          "%(asctime)s - %(name)s - %(levelname)s - %(message)s")

        config = resolve_config(args, file_data)

        progress_bar = tqdm(
            total=config.filters.size,
            disable=not config.show_progress,
            unit="commit"
        )
        try:
            summary = run_extraction(config, on_accept=lambda _record: progress_bar.update(1))
        finally:
            progress_bar.close()

    except CommitExtractorError as e:
        print(f"[ERROR] {e}")
        if log_level == "DEBUG":
            import traceback
            traceback.print_exc()
        sys.exit(1)

    print(f"Total commits processed: {summary.visited}")
    print(f"Total commits saved: {summary.accepted}")


if __name__ == "__main__":
    main()
