# shorts-cutter

Turn a folder of horizontal `.mp4` videos into vertical 720x1280 shorts.
Each video is laid over a blurred, enlarged copy of itself and cropped to
portrait format by FFmpeg. Several files are converted at the same time.

## Requirements

- Python 3.10 or newer
- `ffmpeg` on your `PATH` (the command runs `ffmpeg -version` first and
  stops if that fails)

No third-party Python packages are needed.

## Installation

```
pip install .
```

## Usage

```
shorts-cutter --input DIR --output DIR [--threads COUNT]
```

The same command can be run as `python -m shorts_cutter.cli`.

| Option | Meaning |
|--------|---------|
| `-i`, `--input DIR` | Directory searched recursively for `.mp4` files (extension matched case-insensitively). Must exist. |
| `-o`, `--output DIR` | Directory for the results; created, with its parents, if missing. |
| `-t`, `--threads COUNT` | Number of files converted at once, from 1 to 32. Defaults to the number of CPUs available to the process. |
| `-V`, `--version` | Print the version and exit. |
| `-h`, `--help` | Print usage and exit. |

### What happens

- Every `name.mp4` found (in any subdirectory) becomes `name-short.mp4`
  directly inside the output directory; the input's extension is kept, so
  `clip.MP4` becomes `clip-short.MP4`. Existing output files are
  overwritten. Since subdirectories are flattened, two inputs with the same
  name in different subdirectories write to the same output file.
- Files are processed in sorted path order; at most `COUNT` FFmpeg runs are
  active at once.
- Before a file is converted, the input must be a readable regular file and
  the output directory must be writable (checked by writing and removing a
  `.shorts_cutter_write_test` file).
- Audio is taken from the input's audio stream, so a video without audio is
  reported as failed.
- Each FFmpeg run is limited to 10 minutes; a run that takes longer is
  killed and the file is reported as failed.
- A log file named `shorts-cutter-YYYYMMDD-HHMMSS.log` is appended to in the
  output directory (debug level); info-level messages go to standard output.
- When all files are done a summary is printed: totals, elapsed time and the
  error message of every failed file.

## Exit codes

| Code | Meaning |
|------|---------|
| 0 | Every file was converted |
| 1 | Critical error: bad arguments, FFmpeg missing, no `.mp4` files found, or every file failed |
| 2 | Partial success: some files failed |

Errors that stop the run are printed to standard error as
`Error: <category>: <message>`, for example
`Error: Configuration error: Invalid thread count: 0 (must be > 0 and <= 32)`.

## Using it from Python

`shorts_cutter.cli.main(argv)` runs the whole command and returns the exit
status. The pieces can also be used on their own:

- `shorts_cutter.utils.find_video_files` and `create_file_tasks` collect the
  inputs and pair them with output paths (`FileTask`).
- `shorts_cutter.ffmpeg.FfmpegCommand` builds the FFmpeg invocation and
  `execute_ffmpeg_command` runs it (a coroutine), raising an `FfmpegError`
  subclass on failure.
- `shorts_cutter.worker.WorkerPool(max_workers).execute_tasks(tasks)` (a
  coroutine) converts a batch and returns `ProcessingResults`, whose
  `to_processing_summary()` gives the `ProcessingSummary` used for the report
  and the exit code.
- All errors derive from `shorts_cutter.errors.ShortsCutterError`.

## Limitations

- Only `.mp4` input is looked for, and the output format, size (720x1280)
  and filter are fixed.
- There is no special handling of interrupt or termination signals: the run
  does not wait for conversions in progress to finish before exiting.
- Free disk space is not measured.

## Running the tests

```
pip install ".[test]"
pytest
```