from __future__ import annotations

import os
import sys
import argparse

from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from txtar.archive import Archive
from txtar.constants import ARCHIVE_SUFFIX, ENCODING
from txtar.errors import TxtarError
from txtar.fileio import dump, dump_file, parse_file
from txtar.pathutil import destination, norm_path, to_archive_name


def _iter_inputs(inputs: Iterable[str]) -> Iterable[Tuple[str, str]]:
    """Yield ``(archive_name, fs_path)`` for every regular file under ``inputs``.

    Files given directly are stored under their base name; directories are
    walked and their files stored relative to the directory itself.
    """
    for raw in inputs:
        p = Path(raw)
        if p.is_dir():
            for root, dirnames, filenames in os.walk(str(p)):
                # prune symlink directories to avoid walking into them
                dirnames[:] = sorted(d for d in dirnames if not os.path.islink(os.path.join(root, d)))
                for f in sorted(filenames):
                    full = os.path.join(root, f)
                    if os.path.islink(full):
                        continue
                    yield to_archive_name(full, str(p)), full
        elif p.is_file():
            yield norm_path(p.name), str(p)
        else:
            raise FileNotFoundError(f"No such file or directory: {raw}")


def _next_nonconflicting_path(path: str) -> str:
    if not os.path.lexists(path):
        return path
    base_dir = os.path.dirname(path)
    root, ext = os.path.splitext(os.path.basename(path))
    i = 1
    while True:
        candidate = os.path.join(base_dir, f"{root} ({i}){ext}")
        if not os.path.lexists(candidate):
            return candidate
        i += 1


def cmd_zip(inputs: List[str], *, output: Optional[str] = None, comment: str = "", quiet: bool = False) -> bool:
    """Zip files and directories into a txtar archive.

    Args:
        inputs: Files and/or directories to store.
        output: Destination archive path; the archive goes to stdout when None.
        comment: Top level archive comment.
        quiet: Suppress per-file progress lines.

    Files that are not valid UTF-8 text are skipped with a warning.
    """
    archive = Archive()
    archive.comment = comment
    # Progress shares stdout with the archive otherwise
    progress = not quiet and output is not None
    skipped = 0
    for name, full in _iter_inputs(inputs):
        with open(full, "rb") as fh:
            raw = fh.read()
        try:
            text = raw.decode(ENCODING)
        except UnicodeDecodeError:
            print(f"Warning: skipping {full}: not UTF-8 text", file=sys.stderr)
            skipped += 1
            continue
        archive.add(name, text)
        if progress:
            print(f"    adding: {name}")

    if output is None:
        dump(sys.stdout, archive)
        return True
    dump_file(output, archive)
    if not quiet:
        print(f"Done: {archive.size()} files -> {output}; skipped={skipped}")
    return True


def cmd_unzip(archive: str, *, outdir: str = ".", exists: str = "fail", quiet: bool = False) -> bool:
    """Extract every file of an archive below ``outdir``.

    Args:
        archive: Path to a .txtar file.
        outdir: Directory to extract into (created when missing).
        exists: Policy for destination files that already exist:
            "overwrite", "skip", "rename" (append " (n)" before the
            extension) or "fail".
        quiet: Suppress per-file progress lines.
    """
    arc = parse_file(archive)
    # Resolve every destination before writing anything
    plan = [(name, contents, destination(outdir, name)) for name, contents in arc.files()]

    written = 0
    skipped = 0
    renamed = 0
    for name, contents, dst in plan:
        actual_dst = dst
        if os.path.lexists(dst):
            if os.path.isdir(dst):
                raise RuntimeError(f"Cannot overwrite directory with file: {dst}")
            if exists == "overwrite":
                pass
            elif exists == "skip":
                if not quiet:
                    print(f"  skipping: {name} (exists)")
                skipped += 1
                continue
            elif exists == "rename":
                actual_dst = _next_nonconflicting_path(dst)
            else:
                raise RuntimeError(f"Destination exists: {dst}")
        os.makedirs(os.path.dirname(actual_dst) or ".", exist_ok=True)
        with open(actual_dst, "w", encoding=ENCODING, newline="\n") as fh:
            fh.write(contents)
        written += 1
        if not quiet:
            print(f" unzipping: {name}")
            if actual_dst != dst:
                print(f"      note: renamed to {actual_dst}")
        if actual_dst != dst:
            renamed += 1
    print(f"Done: extracted {written}/{len(plan)} files; skipped={skipped} renamed={renamed}")
    return True


def cmd_list(archive: str) -> bool:
    """List archive files as ``size<TAB>name`` in name order."""
    arc = parse_file(archive)
    for name, contents in arc.files():
        print(f"{len(contents.encode(ENCODING))}\t{name}")
    return True


def cmd_cat(archive: str, names: List[str]) -> bool:
    """Write the contents of the named files to stdout."""
    arc = parse_file(archive)
    for name in names:
        sys.stdout.write(arc.read(name))
    return True


def cmd_comment(archive: str) -> bool:
    arc = parse_file(archive)
    if arc.comment:
        print(arc.comment)
    return True


def cmd_fmt(archives: List[str], *, check: bool = False, quiet: bool = False) -> bool:
    """Rewrite archives in canonical form.

    Args:
        archives: Archive paths and/or directories (searched for *.txtar).
        check: Only report archives that are not canonical; nothing is written.
        quiet: Only print the summary.

    Returns:
        False when ``check`` is set and at least one archive is not canonical.
    """
    paths: List[str] = []
    for p in archives:
        if os.path.isdir(p):
            for root, _dirs, files in os.walk(p):
                paths.extend(os.path.join(root, f) for f in sorted(files) if f.endswith(ARCHIVE_SUFFIX))
        else:
            paths.append(p)
    if not paths:
        raise RuntimeError("No archives found")

    changed = 0
    for path in paths:
        arc = parse_file(path)
        with open(path, "rb") as fh:
            current = fh.read()
        canonical = arc.serialize().encode(ENCODING)
        if current == canonical:
            continue
        changed += 1
        if check:
            if not quiet:
                print(f"would reformat: {path}")
            continue
        dump_file(path, arc)
        if not quiet:
            print(f"   reformatted: {path}")
    verb = "would reformat" if check else "reformatted"
    print(f"Summary: checked={len(paths)} {verb}={changed}")
    return not (check and changed)


def main(argv: List[str] | None = None):
    ap = argparse.ArgumentParser(
        prog="txtar",
        description="Create, inspect and extract txtar text archives",
        epilog="Archives are plain UTF-8 text: an optional comment followed by '-- NAME --' file sections.",
    )
    sub = ap.add_subparsers(dest="cmd", required=True)

    ap_zip = sub.add_parser("zip", help="Zip files/directories into an archive")
    ap_zip.add_argument("inputs", nargs="+", help="Input files/directories")
    ap_zip.add_argument("--output", "-o", help="Output .txtar path (default: stdout)")
    ap_zip.add_argument("--comment", default="", help="Top level archive comment")
    ap_zip.add_argument("--quiet", help="limit outputs to summaries only", action="store_true")

    ap_unzip = sub.add_parser("unzip", help="Extract archive files to a directory")
    ap_unzip.add_argument("archive", help="Archive path")
    ap_unzip.add_argument("--outdir", default=".", help="Output directory")
    ap_unzip.add_argument("--quiet", help="limit outputs to summaries only", action="store_true")
    ap_unzip.add_argument(
        "--exists",
        choices=["overwrite", "skip", "rename", "fail"],
        default="fail",
        help=(
            "What to do if a destination file exists: overwrite, skip, "
            "rename (append ' (n)' before extension), or fail (abort). Default: fail"
        ),
    )

    ap_list = sub.add_parser("list", help="List archive files")
    ap_list.add_argument("archive", help="Archive path")

    ap_cat = sub.add_parser("cat", help="Print archive files")
    ap_cat.add_argument("archive", help="Archive path")
    ap_cat.add_argument("names", nargs="+", help="File names within the archive")

    ap_comment = sub.add_parser("comment", help="Print the archive comment")
    ap_comment.add_argument("archive", help="Archive path")

    ap_fmt = sub.add_parser("fmt", help="Rewrite archives in canonical form")
    ap_fmt.add_argument("archives", nargs="+", help="Archive paths or directories")
    ap_fmt.add_argument("--check", action="store_true", help="Report non-canonical archives without rewriting; exit 1 if any")
    ap_fmt.add_argument("--quiet", help="limit outputs to summaries only", action="store_true")

    args = ap.parse_args(argv)
    try:
        if args.cmd == "zip":
            cmd_zip(args.inputs, output=args.output, comment=args.comment, quiet=args.quiet)
        elif args.cmd == "unzip":
            cmd_unzip(args.archive, outdir=args.outdir, exists=args.exists, quiet=args.quiet)
        elif args.cmd == "list":
            cmd_list(args.archive)
        elif args.cmd == "cat":
            cmd_cat(args.archive, args.names)
        elif args.cmd == "comment":
            cmd_comment(args.archive)
        elif args.cmd == "fmt":
            success = cmd_fmt(args.archives, check=args.check, quiet=args.quiet)
            sys.exit(0 if success else 1)
        else:
            raise RuntimeError("Unknown command")
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    except (TxtarError, OSError, ValueError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
