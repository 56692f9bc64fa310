"""
Benchmark the Mandelbrot field and the convolution passes across partition counts.

Usage examples:
  python -m benchmarking.benchmark --res 768x512,1536x1024 --field-tasks 1,64,512 \
      --conv-tasks 1,64,256 --threads 16 --runs 3
"""

import os
import csv
import time
import argparse
import platform
from typing import List, Tuple

from filters.convolution import ConvolutionFilter
from fractals.base import ConvolutionSettings, FieldSettings
from fractals.mandelbrot import MandelbrotField
from rendering.executor import TaskExecutor
from utils.raster import allocate_raster

# --- Helpers -----------------------------------------------------------------

def parse_resolution_list(res_str: str) -> List[Tuple[int, int]]:
    """
    Parse resolutions like "768x512,1536x1024".
    """
    if not res_str:
        return [(768, 512), (1536, 1024)]
    out: List[Tuple[int, int]] = []
    for token in res_str.split(','):
        token = token.strip().lower()
        if not token:
            continue
        w, h = token.split('x')
        out.append((int(w), int(h)))
    return out

def parse_int_list(token: str) -> List[int]:
    return [int(t) for t in token.split(',') if t.strip()]

def cpu_summary() -> str:
    return platform.processor() or platform.machine() or "Unknown CPU"

# --- Benchmark core ----------------------------------------------------------

def benchmark_field(executor: TaskExecutor, width: int, height: int, max_iter: int,
                    task_size: int, runs: int, warmup: int = 1) -> Tuple[float, int]:
    """
    Runs warmups (not timed), then 'runs' timed field generations.
    Returns (avg_time_seconds, pixels_inside).
    """
    gen = MandelbrotField(FieldSettings(width=width, height=height,
                                       max_iter=max_iter, task_size=task_size))
    raster = allocate_raster(height, width)
    inside = 0
    for _ in range(max(0, warmup)):
        inside = gen.generate(raster, executor)

    times = []
    for _ in range(runs):
        t0 = time.perf_counter()
        inside = gen.generate(raster, executor)
        times.append(time.perf_counter() - t0)
    return sum(times) / len(times), inside

def benchmark_convolution(executor: TaskExecutor, width: int, height: int, nsteps: int,
                          task_size: int, runs: int, warmup: int = 1) -> float:
    filt = ConvolutionFilter(ConvolutionSettings(nsteps=nsteps, task_size=task_size))
    src = allocate_raster(height, width)
    dst = allocate_raster(height, width)
    for _ in range(max(0, warmup)):
        filt.apply(src, dst, executor)

    times = []
    for _ in range(runs):
        t0 = time.perf_counter()
        filt.apply(src, dst, executor)
        times.append(time.perf_counter() - t0)
    return sum(times) / len(times)

# --- CLI ---------------------------------------------------------------------

def main():
    p = argparse.ArgumentParser(description="Benchmark field generation and convolution passes.")
    p.add_argument("--res", type=str, default="768x512,1536x1024",
                   help="Comma separated WxH list")
    p.add_argument("--field-tasks", type=str, default="1,64,512")
    p.add_argument("--conv-tasks", type=str, default="1,64,256")
    p.add_argument("--max-iter", type=int, default=FieldSettings().max_iter)
    p.add_argument("--nsteps", type=int, default=ConvolutionSettings().nsteps)
    p.add_argument("--threads", type=int, default=16)
    p.add_argument("--runs", type=int, default=3)
    p.add_argument("--warmup", type=int, default=1)
    p.add_argument("--csv", type=str, default="benchmark_results.csv")
    args = p.parse_args()

    resolutions = parse_resolution_list(args.res)
    field_tasks = parse_int_list(args.field_tasks)
    conv_tasks = parse_int_list(args.conv_tasks)

    print("=== Hardware Summary ===")
    print("CPU:", cpu_summary())
    print("Threads:", args.threads)
    print()

    if os.path.exists(args.csv):
        os.remove(args.csv)
    with open(args.csv, "w", newline="") as f, TaskExecutor(args.threads) as executor:
        writer = csv.writer(f)
        writer.writerow(["Hardware Summary"])
        writer.writerow(["CPU", cpu_summary()])
        writer.writerow(["Threads", args.threads])
        writer.writerow([])
        writer.writerow(["Resolution", "Stage", "Tasks", "Time (s)", "Pixels inside"])

        for (w, h) in resolutions:
            print(f"=== {w}x{h} ===")
            for tasks in field_tasks:
                avg, inside = benchmark_field(executor, w, h, args.max_iter, tasks,
                                              args.runs, args.warmup)
                print(f"{'field':>12}  tasks={tasks:<5} avg={avg:.4f}s  inside={inside}")
                writer.writerow([f"{w}x{h}", "field", tasks, f"{avg:.4f}", inside])
            for tasks in conv_tasks:
                avg = benchmark_convolution(executor, w, h, args.nsteps, tasks,
                                            args.runs, args.warmup)
                print(f"{'convolution':>12}  tasks={tasks:<5} avg={avg:.4f}s")
                writer.writerow([f"{w}x{h}", "convolution", tasks, f"{avg:.4f}", ""])
            print()

    print(f"Benchmark results saved to {args.csv}")

if __name__ == "__main__":
    main()
