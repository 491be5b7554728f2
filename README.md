# ossim

`ossim` is a small operating-system simulator for coursework. It models:

- CPUs that run processes one instruction per time slot,
- a timer that starts the next slot only after every CPU and the loader have finished the current one,
- a multi-level-queue scheduler with one ready queue for each priority level,
- paged virtual memory with a page table for each process, a RAM device, swap devices and FIFO page replacement.

It also includes a small tool that adds up the integers from 1 to n across several threads.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Running the simulator

```
ossim <config>
```

The simulator reads the configuration file from `input/<config>`, relative to the current directory. It reads the process programs from `input/proc/`.

A configuration file looks like this:

```
2 4 3
1048576 16777216 0 0 0
0 p0s 1
2 p1s 0
4 p1s 0
```

- **Line 1:** the time slice, the number of CPUs and the number of processes. The simulator never uses more CPUs than there are processes.
- **Line 2:** the RAM size in bytes, followed by the sizes of four swap devices. Pages are swapped out to the first swap device only.
- **Remaining lines:** one line for each process. Each line gives the slot at which the process is loaded, the name of its program file under `input/proc/`, and its priority.

A priority runs from 0 to 139, and 0 is the highest. Each priority level may dispatch a limited number of processes before every level's allowance is refilled: level `p` may dispatch `140 - p`.

A process program starts with its default priority and its number of instructions. After that comes one instruction per line:

```
1 5
alloc 300 0
write 100 0 20
read 0 20 1
free 0
calc
```

| Instruction | Arguments | Effect |
|---|---|---|
| `calc` | none | uses the CPU for one slot |
| `alloc` | `size reg` | allocates `size` bytes and records the region as symbol `reg` |
| `free` | `reg` | returns the region of symbol `reg` to the free list |
| `read` | `reg offset dest` | reads the byte at `offset` in region `reg` into register `dest` |
| `write` | `value reg offset` | writes `value` at `offset` in region `reg` |

As the simulation runs, it prints:

- each time slot,
- each loaded process,
- each dispatch and preemption,
- each finished process.

Memory operations print extra information:

- `alloc` prints the page table.
- `read` and `write` print the page table and the non-zero bytes of RAM.

An instruction that fails, such as a read from an unmapped page, is reported as a fault on that CPU. The process then goes on with its next instruction.

### From Python

- `ossim.simulator.read_config(path)` reads a configuration file. Use `parse_config(text)` instead for text you already hold.
- Pass the result to `ossim.simulator.Simulator(config, proc_dir, out)`.
- `Simulator.run()` runs the simulation to the end. It returns the processes in the order they finished.

You can also use the building blocks on their own:

- `ossim.loader.Loader` parses process programs.
- `ossim.scheduler.Scheduler` holds the ready queues.
- `ossim.memphy.MemPhy` models a RAM or swap device.
- `ossim.mm.MemoryManager` holds a process's memory state.
- `ossim.vm` has the allocation, paging and swapping operations.
- `ossim.cpu.run` executes one instruction.

## Summing with threads

```
ossim-sum <num_threads> <n>
```

This splits the range 1..n into `num_threads` consecutive pieces, and the last piece takes any remainder. Each piece is summed in its own thread. The tool prints the total and the CPU time the work took:

```
Sum (multi-thread) from 1 to 100: 5050
Execution Time: 0.000123 seconds
```

The same work is available as `ossim.sumthreads.threaded_sum(n, num_threads)`.

## What it does not do

- Memory is managed by paging only. There is no fixed-size, non-paged memory mode.
- Freeing a region returns it to the process's free list but not to RAM. When a process finishes, its frames are not released either. `ossim.vm.free_pcb_memph` can release them, but the simulator does not call it.
- Each priority level's ready queue holds at most 10 processes. Any process beyond that is dropped silently.
- The swap devices after the first are created but never used.