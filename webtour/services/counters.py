"""
共享计数器状态模块：
- ExclusiveCounter：进程级、由互斥锁保护的计数器，持锁期间异常会使其“中毒”。
- LocalCounter：每个 worker 独占的计数单元，不做任何同步。
- AtomicCounter：所有 worker 共享的全局计数器，自增操作不可分割。
- SharedCounters / WorkerState：分别承载进程级与 worker 级状态的容器。
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, Optional, Tuple

logger = logging.getLogger(__name__)


class LockPoisonedError(RuntimeError):
    """上一个持锁者在临界区内异常退出后，再次获取该锁时抛出。"""

    def __init__(self, name: str):
        super().__init__(f"Lock '{name}' is poisoned: a previous holder failed inside the critical section")
        self.name = name


class _Guard:
    """持锁期间对受保护整数的读写视图。"""

    def __init__(self, owner: "ExclusiveCounter"):
        self._owner = owner

    @property
    def value(self) -> int:
        return self._owner._value

    @value.setter
    def value(self, new_value: int):
        self._owner._value = new_value


class ExclusiveCounter:
    """
    由 threading.Lock 保护的整数计数器。

    所有 worker 共享同一个实例，任意时刻最多只有一个临界区在执行。
    如果持锁代码抛出异常，计数器会被标记为中毒，之后的每次获取都会抛出
    LockPoisonedError，直到调用方显式调用 clear_poison()。
    """

    def __init__(self, value: int = 0, name: str = "exclusive_counter"):
        self.name = name
        self._value = value
        self._lock = threading.Lock()
        self._poisoned = False

    @contextmanager
    def lock(self) -> Iterator[_Guard]:
        """获取锁并返回受保护值的视图；任何退出路径都会释放锁。"""
        with self._lock:
            if self._poisoned:
                raise LockPoisonedError(self.name)
            try:
                yield _Guard(self)
            except BaseException:
                self._poisoned = True
                logger.error(f"Counter '{self.name}' poisoned by a failing holder.")
                raise

    def increment(self) -> int:
        """加 1 并返回新值。"""
        with self.lock() as guard:
            guard.value += 1
            return guard.value

    def get(self) -> int:
        with self.lock() as guard:
            return guard.value

    @property
    def is_poisoned(self) -> bool:
        return self._poisoned

    def clear_poison(self):
        """清除中毒标记，保留当前值。"""
        with self._lock:
            if self._poisoned:
                logger.warning(f"Clearing poisoned state of counter '{self.name}'.")
            self._poisoned = False


class LocalCounter:
    """
    worker 独占的计数单元。

    只会在所属 worker 的事件循环线程上被访问，因此不需要任何锁。
    """

    def __init__(self, value: int = 0):
        self._value = value

    def get(self) -> int:
        return self._value

    def set(self, value: int):
        self._value = value

    def read_and_increment(self) -> int:
        """读取、加 1、写回，返回加 1 之后的值。"""
        count = self.get()
        self.set(count + 1)
        return self.get()


class AtomicCounter:
    """
    所有 worker 共享的全局计数器。

    fetch_add 不可分割，不会丢失更新，也不会失败。CPython 没有用户态的
    无锁整数，这里用一个只包住加法本身的私有锁来保证不可分割性；
    load 不加锁，读到的是某个已完成自增之后的值。
    """

    def __init__(self, value: int = 0):
        self._value = value
        self._lock = threading.Lock()

    def fetch_add(self, delta: int = 1) -> int:
        """加上 delta，返回相加之前的值。"""
        with self._lock:
            previous = self._value
            self._value = previous + delta
        return previous

    def load(self) -> int:
        return self._value


class CombinedCounterState:
    """把一个 worker 本地计数器和全局原子计数器的共享引用组合在一起。"""

    def __init__(self, global_count: AtomicCounter, local_count: Optional[LocalCounter] = None):
        self.global_count = global_count
        self.local_count = local_count if local_count is not None else LocalCounter()

    def increment(self) -> Tuple[int, int]:
        """全局计数和本地计数各加 1，返回 (global, local) 加 1 之后的值。"""
        global_value = self.global_count.fetch_add(1) + 1
        local_value = self.local_count.read_and_increment()
        return global_value, local_value

    def read(self) -> Tuple[int, int]:
        """只读地返回 (global, local)。"""
        return self.global_count.load(), self.local_count.get()


@dataclass
class SharedCounters:
    """进程级状态：在创建任何 worker 之前构造一次，以引用方式传给每个副本。"""
    exclusive: ExclusiveCounter = field(default_factory=ExclusiveCounter)
    global_count: AtomicCounter = field(default_factory=AtomicCounter)


@dataclass
class WorkerState:
    """worker 级状态：每个 worker 启动时新建，随 worker 关闭而销毁。"""
    worker_id: int
    count: LocalCounter
    combined: CombinedCounterState

    @classmethod
    def create(cls, worker_id: int, shared: SharedCounters) -> "WorkerState":
        return cls(
            worker_id=worker_id,
            count=LocalCounter(),
            combined=CombinedCounterState(shared.global_count),
        )
