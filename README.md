# cray

A library for looking inside containers on Linux. It reads process,
cgroup and mount information straight from a proc filesystem and a
cgroup hierarchy, computes CPU, memory, I/O and network rates between
two samples, and builds display-independent text models (tables, trees
and markup strings) for container lists, pod trees, container detail
pages and rootfs layers.

The package has no dependencies outside the standard library.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Modules

Reading the system:

- `cray.procfs` – `ProcReader(root="/proc")` reads a process's `stat`,
  `cmdline`, `status` and `io` files (`read_process`), its parent PID
  (`get_process_ppid`), argument vector (`read_cmdline_raw`), `exe` and
  `cwd` links, cgroup v2 path (`read_unified_cgroup_path`) and network
  counters (`read_net_dev`, which leaves out `lo`, `veth*`, `virbr*`,
  kernel tunnel devices and non-Ethernet interfaces). `list_pids` lists
  numeric directories under the root. Failures raise `ProcError`.
  `parse_proc_stat` and `parse_memory_size` are plain functions.
  Give another root, such as `/proc/<pid>/root/proc`, to read a
  container's processes.
- `cray.cgroup` – `detect_cgroup_version` and `CGroupReader.detect()`
  recognise cgroup v1 or v2 (raising `CGroupError` otherwise);
  `read_limits(path)` returns a `CGroupLimits` with CPU quota, period and
  shares, memory limit and usage, PID limit and count, and block-I/O
  weight. Unreadable values stay zero.
- `cray.mount` – `parse_mountinfo_line`, `read_mounts(pid, proc_root)`,
  `find_root_mount`, `filter_mounts_by_type`, and the overlay helpers
  `parse_overlayfs` (lowerdir, upperdir, workdir) and `overlay_layers`.
- `cray.sampler` – `Sampler` fills in CPU percent, memory percent and
  bytes-per-second rates by comparing with the previous sample. Process
  samples are kept per container ID and discarded when it changes.
- `cray.process` – `ProcessTree` links processes to their parents
  (`roots`, `all`, `get`); `ProcessCollector` gathers a container's
  processes through its root's proc filesystem and returns a `ProcessTop`
  with rates, cgroup limits and network I/O. `filter_processes`,
  `sort_by_memory` and `sort_by_io` work on process lists.
- `cray.records` and `cray.models` – the dataclasses used throughout:
  `Process`, `NetworkStats`, `Mount`, `CGroupLimits`, `ProcessTop`,
  `Container`, `ContainerDetail`, `Image`, `ImageLayer` and related
  records.

Text view models:

- `cray.formatting` – `format_age`, `format_bytes`, `format_size`,
  `short_id`, `truncate_for_card`, `fallback_value`.
- `cray.components` – `Table` with `Column` definitions, `TreeNode`, and
  `render_sections` / `render_items` for label/value panels.
- `cray.lists` – `ContainerList` and `ImageList`, which fill a `Table`
  and produce status bar text.
- `cray.tree` – `ContainerTree` groups containers under their pods, keeps
  the current node across redraws and can expand or collapse all pods.
- `cray.detail` – `DetailTab`, `header_lines`, `tab_bar_text`,
  `status_bar_text` and `merge_runtime_detail`.
- `cray.summary` – `build_detail_sections` and `build_summary_tree` for
  the summary page of a container.
- `cray.layers` – `LayersView` shows the writable layer and the
  read-only image layers, and opens a file browser with previews on the
  selected layer's path (`handle_key("i")`).
- `cray.navigation` – `Navigator` keeps a page history and calls back to
  switch pages and move the focus.
- `cray.updates` – `UpdateDispatcher` runs UI updates at once before the
  first draw and queues them from a separate thread afterwards.

Text produced by the view models carries colour markup such as
`[green]...[-]`.

## Examples

```python
from cray.procfs import ProcReader
from cray.process import ProcessTree

reader = ProcReader("/proc")
tree = ProcessTree.build(reader, reader.list_pids())
for proc in tree.roots():
    print(proc.pid, proc.command, len(proc.children))
```

```python
from cray.mount import read_mounts, find_root_mount, overlay_layers

mounts = read_mounts(1, "/proc")
root = find_root_mount(mounts)
if root is not None:
    print(root.type, overlay_layers(root))
```

## What it does not do

- There is no command to run and no interactive terminal screen. The view
  modules build tables, trees and marked-up strings; drawing them and
  reading keys is left to the caller.
- It does not talk to a container runtime. Lists of containers, images,
  container details and image layers are passed in by the caller as the
  records in `cray.models`.
- There is no pod list view; pods appear only as groups in
  `ContainerTree`.