import csv

import pytest

from media_linker import main as cli


def _argv(root, *extra):
    return [
        str(root / "downloads"),
        "--out-dir", "movies", str(root / "out" / "Movies"),
        "--out-dir", "shows", str(root / "out" / "TV"),
        "--no-progress",
        *extra,
    ]


def test_parse_args_defaults():
    args = cli.parse_args(["in", "--out-dir", "movies", "m"])
    assert args.out_dir == [["movies", "m"]]
    assert not args.dry_run
    assert not args.creation_sandbox and not args.deletion_sandbox
    assert args.report_csv is None


def test_main_links_and_creates_destinations(root, make_files):
    [src] = make_files("downloads/Serenity.2005.mkv")

    assert cli.main(_argv(root)) == 0

    link = root / "out" / "Movies" / "Serenity (2005).mkv"
    assert link.is_symlink()
    assert link.resolve() == src.resolve()
    assert (root / "out" / "TV").is_dir()


def test_dry_run_leaves_filesystem_untouched(root, make_files):
    make_files("downloads/Serenity.2005.mkv")
    stale = root / "out" / "TV" / "Old Show"
    stale.mkdir(parents=True)

    assert cli.main(_argv(root, "--dry-run")) == 0

    assert not (root / "out" / "Movies").exists()
    assert stale.is_dir()


def test_report_csv_option(root, make_files):
    make_files("downloads/Serenity.2005.mkv")
    report = root / "report.csv"

    assert cli.main(_argv(root, "--report-csv", str(report))) == 0

    with open(report, newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert [row["Action"] for row in rows] == ["create"]


def test_failed_links_give_exit_code_2(root, make_files):
    make_files("downloads/The.West.Wing.S02E03.The.Midterms.mkv", "downloads/Serenity.2005.mkv")
    # A file where the show folder should be makes the episode link impossible
    (root / "out" / "TV").mkdir(parents=True)
    (root / "out" / "TV" / "The West Wing").write_text("not a directory")

    assert cli.main(_argv(root)) == 2
    assert (root / "out" / "Movies" / "Serenity (2005).mkv").is_symlink()


def test_unusable_destination_exits_1(root, make_files):
    make_files("downloads/Serenity.2005.mkv")
    (root / "out").mkdir()
    (root / "out" / "Movies").write_text("not a directory")

    assert cli.main(_argv(root)) == 1


@pytest.mark.parametrize(
    "argv",
    [
        ["{root}/downloads"],                                         # no destinations
        ["{root}/downloads", "--out-dir", "music", "{root}/out"],      # unknown category
        ["{root}/nowhere", "--out-dir", "movies", "{root}/out"],       # missing input
    ],
)
def test_configuration_errors_exit_1(root, make_files, argv):
    make_files("downloads/Serenity.2005.mkv")
    assert cli.main([a.format(root=root) for a in argv]) == 1


def test_resolve_dest_dirs_respects_sandbox(root):
    dest = cli.resolve_dest_dirs([["shows", str(root / "TV")]], create=False)
    assert dest == {"shows": root / "TV"}
    assert not (root / "TV").exists()

    cli.resolve_dest_dirs([["shows", str(root / "TV")]], create=True)
    assert (root / "TV").is_dir()
