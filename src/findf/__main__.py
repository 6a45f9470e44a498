"""
findf 包的命令行入口点，使用 Typer 实现命令行界面
"""
import os
import sys
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Optional

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TimeElapsedColumn
from rich.table import Table

from .config import load_config, DEFAULT_LOG_DIR
from .core.engine import FileFinder
from .core.errors import FindfError
from .core.models import CollisionPolicy, FinalReport, ProgressSnapshot, RunState
from .core.roots import discover_roots, has_full_disk_access


def setup_logger(app_name="app", project_root=None, console_output=True):
    """配置 Loguru 日志系统

    Args:
        app_name: 应用名称，用于日志目录
        project_root: 日志根目录，默认为 ~/.findf/logs
        console_output: 是否输出到控制台，默认为True

    Returns:
        tuple: (logger, config_info)
            - logger: 配置好的 logger 实例
            - config_info: 包含日志配置信息的字典
    """
    if project_root is None:
        project_root = DEFAULT_LOG_DIR

    # 清除默认处理器
    logger.remove()

    # 有条件地添加控制台处理器（简洁版格式）
    if console_output:
        logger.add(
            sys.stdout,
            level="INFO",
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <blue>{elapsed}</blue> | <level>{level.icon} {level: <8}</level> | <cyan>{name}:{function}:{line}</cyan> - <level>{message}</level>"
        )

    # 使用 datetime 构建日志路径
    current_time = datetime.now()
    date_str = current_time.strftime("%Y-%m-%d")
    hour_str = current_time.strftime("%H")
    minute_str = current_time.strftime("%M%S")

    log_dir = os.path.join(project_root, app_name, date_str, hour_str)
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, f"{minute_str}.log")

    # 添加文件处理器
    logger.add(
        log_file,
        level="DEBUG",
        rotation="10 MB",
        retention="30 days",
        compression="zip",
        encoding="utf-8",
        format="{time:YYYY-MM-DD HH:mm:ss} | {elapsed} | {level.icon} {level: <8} | {name}:{function}:{line} - {message}",
        enqueue=True,
    )

    config_info = {
        'log_file': log_file,
    }

    logger.info(f"日志系统已初始化，应用名称: {app_name}")
    return logger, config_info


# 创建 Typer 应用
app = typer.Typer(help="文件查找工具 - 按名单在家目录和所有挂载卷中查找文件并复制到目标文件夹")

console = Console()


class CollisionChoice(str, Enum):
    overwrite = "overwrite"
    rename = "rename"
    fail = "fail"


def render_report(report: FinalReport) -> None:
    """用 Rich 输出运行总结"""
    table = Table(title="运行总结", show_header=False)
    table.add_column("项目", style="cyan")
    table.add_column("数量", justify="right")
    table.add_row("扫描文件", str(report.files_scanned))
    table.add_row("命中文件", str(report.total_matches))
    table.add_row("成功复制", f"[green]{report.files_copied}[/green]")
    failed_style = "red" if report.failed_copies else "green"
    table.add_row("复制失败", f"[{failed_style}]{report.failed_copies}[/{failed_style}]")
    table.add_row("耗时", f"{report.elapsed_seconds:.2f} 秒")
    console.print(table)

    if report.errors:
        errors = Table(title="复制失败的文件")
        errors.add_column("文件", style="yellow")
        errors.add_column("原因", style="red")
        for error in report.errors:
            errors.add_row(str(error.path), error.cause)
        console.print(errors)

    console.print(Panel(report.render().rstrip(), title="findf", border_style="green"))


@app.command()
def search(
    name_list: Path = typer.Argument(..., help="名单文件，每行一个文件名"),
    destination: Path = typer.Argument(..., help="复制到的目标文件夹"),
    roots: Optional[List[Path]] = typer.Option(None, "--root", "-r", help="要扫描的根目录（可重复），默认家目录和所有挂载卷"),
    include_system: bool = typer.Option(False, "--include-system", help="不排除系统文件夹和隐藏路径"),
    on_collision: Optional[CollisionChoice] = typer.Option(None, "--on-collision", help="目标中已有同名文件时的处理方式"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="配置文件路径，默认 ~/.findf/config.toml"),
    create_dest: bool = typer.Option(False, "--create-dest", help="目标文件夹不存在时自动创建"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="不在控制台输出日志"),
):
    """按名单查找文件并复制到目标文件夹"""
    try:
        config = load_config(config_path)
    except FindfError as e:
        console.print(f"[bold red]错误:[/bold red] {e}")
        raise typer.Exit(code=1)

    setup_logger(app_name="findf", project_root=config.log_dir, console_output=not quiet)

    if include_system:
        config = config.with_overrides(exclude_system_folders=False)
    if on_collision is not None:
        config = config.with_overrides(collision_policy=CollisionPolicy(on_collision.value))

    if not has_full_disk_access():
        logger.warning("未获得完全磁盘访问权限，部分受保护的文件夹将被跳过")
        console.print("[yellow]提示: 在 系统设置 > 隐私与安全性 > 完全磁盘访问权限 中添加终端可扫描受保护的文件夹[/yellow]")

    destination = destination.expanduser().resolve()
    if create_dest and not destination.exists():
        try:
            destination.mkdir(parents=True)
            logger.info(f"已创建目标目录: {destination}")
        except OSError as e:
            logger.error(f"错误: 无法创建目标目录 {destination}: {e}")
            raise typer.Exit(code=1)

    finder = FileFinder(config)
    request = finder.build_request(
        name_list_path=name_list.expanduser(),
        destination=destination,
        roots=[r.expanduser().resolve() for r in roots] if roots else None,
    )

    mode = "排除系统文件夹" if request.exclude_system_folders else "扫描全部文件夹"
    logger.info(f"名单文件: {request.name_list_path}")
    logger.info(f"目标目录: {request.destination}")
    logger.info(f"扫描模式: {mode}")

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("[{task.completed}/{task.total}]"),
        TextColumn("•"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        task_id = progress.add_task("[cyan]正在扫描...", total=None)

        def on_progress(snap: ProgressSnapshot) -> None:
            if snap.state is RunState.SCANNING:
                progress.update(task_id, description=f"[cyan]正在扫描... 已扫描 {snap.files_scanned} 个文件")
            elif snap.state is RunState.COPYING:
                done = snap.files_copied + snap.failed_copies
                progress.update(
                    task_id,
                    total=snap.total_matches,
                    completed=done,
                    description=f"[green]正在复制... 已复制 {snap.files_copied} 个文件",
                )

        try:
            report = finder.run(request, on_progress=on_progress)
        except FindfError as e:
            logger.error(f"错误: {e}")
            raise typer.Exit(code=1)

    render_report(report)


@app.command()
def roots(
    config_path: Optional[Path] = typer.Option(None, "--config", help="配置文件路径，默认 ~/.findf/config.toml"),
):
    """列出会被扫描的根目录"""
    try:
        config = load_config(config_path)
    except FindfError as e:
        console.print(f"[bold red]错误:[/bold red] {e}")
        raise typer.Exit(code=1)

    setup_logger(app_name="findf", project_root=config.log_dir, console_output=False)
    table = Table(title="根目录")
    table.add_column("#", justify="right", style="cyan")
    table.add_column("路径")
    for index, root in enumerate(discover_roots(), 1):
        table.add_row(str(index), str(root))
    console.print(table)


def main():
    """主入口函数"""
    app()


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        logger.error("操作已中断")
