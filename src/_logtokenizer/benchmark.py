"""
Throughput benchmark for tokenize over fixed sample log lines.
"""

import timeit
from dataclasses import dataclass

import numpy as np

from _logtokenizer.tokenizer import tokenize

SAMPLE_LINES = {
    "auditd_syscall": (
        "type=SYSCALL msg=audit(1364481363.243:24287): arch=c000003e syscall=2 "
        "success=no exit=-13 a0=7fffd19c5592 a1=0 a2=7fffd19c4b50 a3=a items=1 "
        "ppid=2686 pid=3538 auid=500 uid=500 gid=500 euid=500 suid=500 fsuid=500 "
        'egid=500 sgid=500 fsgid=500 tty=pts0 ses=1 comm="cat" exe="/bin/cat" '
        "subj=unconfined_u:unconfined_r:unconfined_t:s0-s0:c0.c1023 "
        'key="sshd_config"'
    ),
    "auditd_cwd": (
        'type=CWD msg=audit(1364481363.243:24287):  cwd="/home/shadowman"'
    ),
    "auditd_path": (
        "type=PATH msg=audit(1364481363.243:24287): item=0 "
        'name="/etc/ssh/sshd_config" inode=409248 dev=fd:00 mode=0100600 '
        "ouid=0 ogid=0 rdev=00:00 obj=system_u:object_r:etc_t:s0"
    ),
    "syslog_wpa_supplicant": (
        "Oct 15 06:23:44 localhost wpa_supplicant[1212]: wlan0: WPA: "
        "Group rekeying completed with 64:7c:34:ab:93:88 [GTK=TKIP]"
    ),
}


class NonRepeatableTokenizationError(Exception):
    """
    Raised by benchmark if tokenizing the same line twice
    gave different tokens.
    """

    pass


@dataclass
class BenchmarkResult:
    """
    Timings of tokenizing one line, all in seconds per call.
    """

    name: str
    calls: int
    mean: float
    median: float
    p95: float
    best: float

    @property
    def lines_per_second(self):
        return 1.0 / self.mean if self.mean > 0 else float("inf")


def benchmark(lines=None, number=1000, repeat=5):
    """
    Time tokenize on each of the given lines.

    :param lines: Dictionary of name to line, defaults to SAMPLE_LINES.
    :param number: Number of calls to tokenize in each timed batch.
    :param repeat: Number of timed batches per line.
    :returns: List of BenchmarkResult, one per line.
    :raises UnparseableInputError: If any of the lines does not tokenize.
    """
    if lines is None:
        lines = SAMPLE_LINES
    if number < 1 or repeat < 1:
        raise ValueError("number and repeat has to be positive")

    results = []
    for name, line in lines.items():
        expected = tokenize(line)
        if tokenize(line) != expected:
            raise NonRepeatableTokenizationError(
                f"Tokenizing {name} twice gave different tokens"
            )
        batch_times = np.array(
            timeit.repeat(lambda: tokenize(line), number=number, repeat=repeat)
        )
        per_call = batch_times / number
        results.append(
            BenchmarkResult(
                name=name,
                calls=number * repeat,
                mean=float(np.mean(per_call)),
                median=float(np.median(per_call)),
                p95=float(np.percentile(per_call, 95)),
                best=float(np.min(per_call)),
            )
        )
    return results
