# imflip

Mirror uncompressed 24-bit BMP images, either top to bottom (vertical flip)
or left to right (horizontal flip). A flip can run serially, on a pool of
threads, or over a row-partitioned set of ranks that swap rows with each
other. The package also includes a small benchmark that estimates pi by
numerical integration in four different ways.

## Installation

```
pip install .
```

To run the test suite, install the `test` extra:

```
pip install ".[test]"
pytest
```

## Commands

Each command returns exit status 0 on success. It returns 1 when an argument
is invalid, or when the input cannot be read or the output cannot be written.

### `imflip`

```
imflip INPUT.bmp OUTPUT.bmp [v|h|w|i] [THREADS]
```

* `v` flips vertically and `h` flips horizontally. `w` and `i` are the
  row-buffered vertical and horizontal variants. The flip type defaults to
  `v`. Only the first letter is used, and case does not matter.
* `THREADS` defaults to 1 and must be between 0 and 128. `0` and `1` run
  the serial version. Larger numbers share the rows among that many threads.

The command reads the input and applies the flip 129 times to time it. Since
129 is odd, the image is written flipped exactly once. The command then
prints the average time per flip, the flip type, and the time per pixel.

Example:

```
imflip dog.bmp dog_mirrored.bmp h 8
```

### `imflip-distributed`

```
imflip-distributed INPUT.bmp OUTPUT.bmp {v|h} [PROCS]
```

The command splits the image rows among `PROCS` ranks. `PROCS` defaults to 1.
The first `PROCS - 1` ranks each own `height // PROCS` consecutive rows, and
the last rank owns the rest. Each rank flips its own slice:

* A horizontal flip needs no coordination between ranks.
* A vertical flip swaps row `i` with row `height - 1 - i`. When one rank owns
  both rows, it swaps them locally. Otherwise the two owning ranks exchange
  the rows.

The slices are then gathered back into one image. The command prints the
total time, the time spent moving data between ranks, and the remaining
flipping time. Only `v` and `h` are accepted.

### `imflip-pi`

```
imflip-pi [VERSION] [THREADS] [--steps N]
```

The command estimates pi by integrating `4 / (1 + x²)` over [0, 1]. The
estimate runs 5 times, and the command prints the value and the average time.
There are four versions:

1. a serial left-rectangle sum, which ignores `THREADS`
2. midpoint sums, with each thread accumulating into a shared list
3. midpoint sums, with private partial sums combined under a lock
4. a left-rectangle sum, with the range split evenly and the partial sums
   reduced

`VERSION` and `THREADS` both default to 1. `--steps` defaults to
1,000,000,000. That is very slow in pure Python, so pass a smaller value for
quick runs. Results are rounded to single precision.

## Library use

* `imflip.bmp` provides `BmpImage`, `parse_bmp`, `read_bmp`, `write_bmp`,
  `row_stride` and `BmpError`.
  * `BmpImage` holds the 54-byte header and the padded pixel rows. The rows
    are stored bottom-up in B, G, R order, exactly as in the file.
  * `copy()`, `row(index)` and `to_bytes()` are its methods.
  * `BmpError` is a `ValueError`. It is raised for malformed headers,
    negative dimensions and truncated pixel data. A missing file raises the
    usual `OSError`.
  * `row_stride(width)` gives the length of a row in bytes, padded to a
    multiple of four.
* `imflip.flip` provides `FlipKind` and the in-place flips:
  * `FlipKind.parse(text)` reads the one-letter code.
  * The flips are `flip_vertical`, `flip_horizontal`,
    `flip_vertical_threaded` and `flip_horizontal_threaded`.
  * `select_flip(kind, threads)` chooses the routine the way `imflip` does.
  * Horizontal flips leave the row padding untouched.
* `imflip.distributed` provides `distributed_flip(image, kind, procs)`,
  `RowPartition` and `DistributedResult`.
  * `distributed_flip` returns a flipped copy together with the number of
    exchanged rows, the number of local swaps, and the timings.
  * `RowPartition` has the methods `owner`, `local_index`, `rows` and
    `byte_ranges`.
* `imflip.pi` provides `pi_v1` to `pi_v4` and `pick_pi_function(version)`.
  * `pick_pi_function` returns a callable that takes `(steps, threads)`.

The header is never changed. It is written back unchanged with the flipped
pixels.

## Limitations

* Only the image width and height are read from the header. The bit depth
  and compression fields are not checked, so the input must really be an
  uncompressed 24-bit BMP.
* Negative heights are rejected, so top-down BMPs are not supported.
* `imflip-distributed` runs all of its ranks inside a single Python process.
  It does not start separate processes or communicate over a network. Its
  "communication" time is the time spent copying slices and rows between
  in-memory buffers.
* The threaded flips and pi estimators use Python threads. They demonstrate
  the work split, but they are not expected to run faster than the serial
  versions.