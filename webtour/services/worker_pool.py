"""
worker 池模块：
- 绑定一个监听 socket，在启动任何 worker 之前创建一次进程级共享状态。
- 启动固定数量的 worker 线程；每个 worker 通过 create_app 得到自己的应用副本，
  在自己的事件循环里用独立的 uvicorn.Server 服务同一个监听 socket 的副本。
- 停止时通知所有 worker 退出并等待其完成关闭流程。
"""

import asyncio
import logging
import socket
import threading
import time
from typing import List, Optional

import uvicorn

from ..app import create_app
from ..core.config import SettingsDict
from .counters import SharedCounters

logger = logging.getLogger(__name__)

class Worker(threading.Thread):
    """
    一个 worker：一个线程、一个事件循环、一个应用副本。

    同一个 worker 内的请求处理函数都在这个线程的事件循环上依次执行。
    """

    def __init__(self, worker_id: int, settings: SettingsDict, shared: SharedCounters, sock: socket.socket):
        super().__init__(name=f"worker-{worker_id}", daemon=True)
        self.worker_id = worker_id
        self.sock = sock
        self.app = create_app(settings, shared, worker_id=worker_id)
        config = uvicorn.Config(
            self.app,
            host=settings["server"]["host"],
            port=settings["server"]["port"],
            lifespan="on",
            log_config=None,
        )
        self.server = uvicorn.Server(config)

    def run(self):
        logger.debug(f"Worker {self.worker_id} serving on fd {self.sock.fileno()}")
        try:
            asyncio.run(self.server.serve(sockets=[self.sock]))
        finally:
            self.sock.close()

    @property
    def started(self) -> bool:
        return self.server.started

    def stop(self):
        self.server.should_exit = True

class WorkerPool:
    """
    固定大小的 worker 池。

    用法：
        pool = WorkerPool(settings)
        pool.run()  # 阻塞，直到收到中断或所有 worker 退出
    """

    def __init__(self, settings: SettingsDict, shared: Optional[SharedCounters] = None):
        self.settings = settings
        self.shared = shared if shared is not None else SharedCounters()
        self.workers: List[Worker] = []
        self._sock: Optional[socket.socket] = None

    @property
    def port(self) -> int:
        """实际监听的端口，配置端口为 0 时由系统分配。"""
        if self._sock is None:
            raise RuntimeError("WorkerPool has not been started")
        return self._sock.getsockname()[1]

    def _bind(self) -> socket.socket:
        server_settings = self.settings["server"]
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((server_settings["host"], server_settings["port"]))
        sock.listen(2048)
        sock.setblocking(False)
        return sock

    def start(self):
        """绑定 socket 并启动所有 worker。"""
        if self.workers:
            raise RuntimeError("WorkerPool is already running")
        self._sock = self._bind()
        count = self.settings["server"]["workers"]
        logger.info(
            f"Starting {count} workers on "
            f"http://{self.settings['server']['host']}:{self.port}"
        )
        for worker_id in range(count):
            # 每个 worker 持有自己的文件描述符，关闭时互不影响
            worker = Worker(worker_id, self.settings, self.shared, self._sock.dup())
            self.workers.append(worker)
            worker.start()

    def wait_until_started(self, timeout: float = 10.0) -> bool:
        """等待所有 worker 完成启动，超时返回 False。"""
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if all(worker.started for worker in self.workers):
                return True
            if not any(worker.is_alive() for worker in self.workers):
                return False
            time.sleep(0.05)
        return False

    def stop(self, timeout: float = 10.0):
        """通知所有 worker 退出，等待其关闭，然后释放监听 socket。"""
        logger.info("Stopping workers...")
        for worker in self.workers:
            worker.stop()
        for worker in self.workers:
            worker.join(timeout)
            if worker.is_alive():
                logger.warning(f"Worker {worker.worker_id} did not stop within {timeout}s")
        self.workers = []
        if self._sock is not None:
            self._sock.close()
            self._sock = None
        exclusive = "poisoned" if self.shared.exclusive.is_poisoned else self.shared.exclusive.get()
        logger.info(
            f"All workers stopped. exclusive_count={exclusive}, "
            f"global_count={self.shared.global_count.load()}"
        )

    def run(self):
        """启动并阻塞，直到 Ctrl+C 或所有 worker 退出。"""
        self.start()
        try:
            while any(worker.is_alive() for worker in self.workers):
                time.sleep(0.5)
        except KeyboardInterrupt:
            pass
        finally:
            self.stop()
