"""
应用启动逻辑模块：
- 解析命令行参数。
- 加载配置。
- 初始化日志。
- 创建 worker 池并运行。
"""

import argparse
import json
import logging.config
import signal
import sys

from .core.config import load_settings
from .core.logging_config import get_logging_config
from .services.worker_pool import WorkerPool

COMMANDS = ("run", "show-config")

def _load_with_overrides(args):
    """加载配置文件，并用命令行参数覆盖对应项。"""
    settings = load_settings(args.config)
    if getattr(args, "host", None):
        settings["server"]["host"] = args.host
    if getattr(args, "port", None) is not None:
        settings["server"]["port"] = args.port
    if getattr(args, "workers", None) is not None:
        if args.workers < 1:
            raise ValueError(f"--workers must be at least 1, got {args.workers}")
        settings["server"]["workers"] = args.workers
    return settings

def _raise_keyboard_interrupt(signum, frame):
    raise KeyboardInterrupt

def run_server(args):
    """启动 worker 池"""
    # 1. 加载配置
    settings = _load_with_overrides(args)

    # 2. 初始化日志
    logging_config = get_logging_config(settings["log_level"])
    logging.config.dictConfig(logging_config)

    # 3. SIGTERM 与 Ctrl+C 走同一条关闭路径
    signal.signal(signal.SIGTERM, _raise_keyboard_interrupt)

    # 4. 创建共享状态与 worker，阻塞直到退出
    pool = WorkerPool(settings)
    pool.run()

def show_config(args):
    """打印合并后的配置"""
    settings = _load_with_overrides(args)
    print(json.dumps(settings, indent=2, ensure_ascii=False))

def _add_common_arguments(parser: argparse.ArgumentParser):
    parser.add_argument(
        "-c", "--config",
        type=str,
        help="Path to the configuration JSON file."
    )
    parser.add_argument(
        "-w", "--workers",
        type=int,
        help="Number of worker threads. Overrides the config file."
    )
    parser.add_argument("--host", type=str, help="Bind address. Overrides the config file.")
    parser.add_argument("--port", type=int, help="Bind port. Overrides the config file.")

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="webtour demo server. Use 'run' to start the server or 'show-config' to print the effective settings."
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # 'run' 子命令 (启动服务器)
    parser_run = subparsers.add_parser("run", help="Run the demo server (default command)")
    _add_common_arguments(parser_run)
    parser_run.set_defaults(func=run_server)

    # 'show-config' 子命令
    parser_show = subparsers.add_parser("show-config", help="Print the merged configuration as JSON")
    _add_common_arguments(parser_show)
    parser_show.set_defaults(func=show_config)

    return parser

def run(argv=None):
    """
    主运行函数，用于解析命令行参数并分发到相应的处理函数。
    """
    argv = sys.argv[1:] if argv is None else list(argv)
    # 没有子命令时按 'run' 处理，这使得 `webtour -w 2` 和 `webtour run -w 2` 效果相同
    if not argv or argv[0] not in COMMANDS + ("-h", "--help"):
        argv = ["run"] + argv
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        args.func(args)
    except (FileNotFoundError, ValueError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        sys.exit(1)

if __name__ == "__main__":
    run()
