# annbench

Building blocks for benchmarking approximate nearest-neighbour (ANN) indexes. The
package has no dependencies outside the standard library.

## What it provides

- `annbench.config`: typed, declarative index parameters. `Config.declare(name, kind)`
  declares an entry of kind `int`, `float`, `str`, `list` or `bool` and returns an
  `EntryAccess` builder (`set_default`, `set_range`, `description`, `for_train`,
  `for_search`, `for_range_search`, `for_feder`, `for_all`). Declared entries read and
  write as attributes. `Config.load(json, param_type)` reads a mapping for one
  `ParamType`; it raises `ConfigError`, carrying a `Status`, when a value is missing
  with no default, has the wrong type, lies outside its range or overflows.
  `Config.save()` returns the integer, float and string parameters as a dictionary.
  `BaseConfig` declares the common parameters `metric_type`, `k`, `num_build_thread`,
  `radius`, `range_filter` and `trace_visit`; `get_build_thread_num()` returns the
  configured thread limit or the number of CPUs. `LoadConfig` holds the `enable_mmap`
  option.
- `annbench.vectors`: `normalize_vec` and `normalize` scale vectors to unit length as
  single-precision values (a zero vector gives NaN components); `hash_vec` hashes the
  single-precision bit patterns of a vector into 64 bits; `is_metric_type` compares
  metric names without regard to case.
- `annbench.recall`: `GroundTruth` scores results against reference neighbours:
  `calc_recall` and `calc_recall_slice` for top-k searches; `calc_hits`,
  `calc_hits_from`, `calc_range_recall` and `calc_accuracy` for range searches.
  `check_distance` raises `DistanceMismatch` when a reported distance of a known
  neighbour differs from the reference by `FLOAT_DIFF` or more.
- `annbench.index_file`: `write_binary_set` and `read_binary_set` store a mapping of
  names to byte blobs in one file (each record: name length and data length as
  little-endian 64-bit integers, then name, then data). `index_file_name` builds names
  such as `sift-128-euclidean_IVF_FLAT_1024.index`.
- `annbench.tuning`: `find_smallest_param` bisects a parameter range for a value that
  reaches a target recall; `split_work` shares items out in contiguous ranges;
  `run_parallel` calls a function for every item on worker threads and returns the
  elapsed seconds; `Stopwatch` measures elapsed time.

## Example

```python
from annbench.config import BaseConfig, ConfigError, ParamType, Status
from annbench.recall import GroundTruth
from annbench.tuning import find_smallest_param

cfg = BaseConfig()
cfg.load({"metric_type": "L2", "k": 100}, ParamType.SEARCH)
assert cfg.k == 100

try:
    BaseConfig().load({"k": 0}, ParamType.SEARCH)
except ConfigError as err:
    assert err.status is Status.OUT_OF_RANGE_IN_JSON

truth = GroundTruth(ids=[1, 2, 3, 4], k=2)
print(truth.calc_recall([1, 9, 4, 3], nq=2, k=2))  # 0.75

nprobe = find_smallest_param(lambda p: min(1.0, p / 64), 1, 256, 0.95, 0.0001)
```

## What it does not do

The package contains no index implementations, no reader for dataset files and no
command-line program. It measures and checks results that you obtain from an index
of your own: you supply the result ids, distances and ground-truth neighbours.

## Running the tests

```
pip install -e ".[test]"
pytest
```