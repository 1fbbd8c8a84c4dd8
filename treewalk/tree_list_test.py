import contextlib
import hashlib
import io
import json
import os
import tempfile
import unittest

from treewalk import tree_list


class TreeListTest(unittest.TestCase):

    def setUp(self):
        super(TreeListTest, self).setUp()
        self._tmp = tempfile.TemporaryDirectory()
        self.work = self._tmp.name
        self.root = os.path.join(self.work, "root")
        self.files = {
            os.path.join("a.txt"): b"alpha\n",
            os.path.join("sub", "b.txt"): b"beta\n",
            os.path.join("sub", "deeper", "c.txt"): b"gamma\n",
        }
        for rel, data in self.files.items():
            path = os.path.join(self.root, rel)
            os.makedirs(os.path.dirname(path), exist_ok=True)
            with open(path, "wb") as f:
                f.write(data)
        os.makedirs(os.path.join(self.root, "empty"))

    def tearDown(self):
        self._tmp.cleanup()
        super(TreeListTest, self).tearDown()

    def run_main(self, *args):
        out = io.StringIO()
        err = io.StringIO()
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            code = tree_list.main(list(args))
        return code, out.getvalue().splitlines(), err.getvalue()

    def write_config(self, text):
        path = os.path.join(self.work, "config.yml")
        with open(path, "w") as f:
            f.write(text)
        return path

    def test_lists_all_files(self):
        code, lines, err = self.run_main(self.root)
        self.assertEqual(code, 0)
        self.assertEqual(sorted(lines), sorted(
            os.path.join(self.root, rel) for rel in self.files))
        self.assertEqual(err, "")

    def test_relative(self):
        code, lines, _ = self.run_main("--relative", self.root)
        self.assertEqual(code, 0)
        self.assertEqual(sorted(lines), sorted(self.files))

    def test_digest(self):
        code, lines, _ = self.run_main("--relative", "--digest", "sha256", self.root)
        self.assertEqual(code, 0)
        expected = sorted(
            f"{hashlib.sha256(data).hexdigest()}  {rel}"
            for rel, data in self.files.items())
        self.assertEqual(sorted(lines), expected)

    def test_save(self):
        output = os.path.join(self.work, "listing.json")
        code, lines, _ = self.run_main(
            "--relative", "--digest", "sha1", "--save", output, self.root)
        self.assertEqual(code, 0)
        with open(output) as f:
            saved = json.load(f)
        self.assertEqual(len(saved), len(lines))
        self.assertEqual(
            sorted(item["path"] for item in saved), sorted(self.files))
        for item in saved:
            self.assertEqual(item["digest"],
                             hashlib.sha1(self.files[item["path"]]).hexdigest())

    def test_verbose(self):
        code, lines, err = self.run_main("--verbose", self.root)
        self.assertEqual(code, 0)
        self.assertIn(f"Scanning tree: {self.root}", err)
        self.assertIn("Found 3 files", err)
        self.assertEqual(len(lines), 3)

    def test_missing_root(self):
        code, lines, err = self.run_main(os.path.join(self.work, "missing"))
        self.assertEqual(code, 1)
        self.assertEqual(lines, [])
        self.assertIn("Error: Path is not a directory", err)

    def test_unknown_digest(self):
        code, lines, err = self.run_main("--digest", "no-such-hash", self.root)
        self.assertEqual(code, 1)
        self.assertEqual(lines, [])
        self.assertIn("Unknown digest algorithm", err)

    def test_config_file(self):
        config = self.write_config("relative: true\ndigest: sha1\n")
        code, lines, _ = self.run_main("--config", config, self.root)
        self.assertEqual(code, 0)
        expected = sorted(
            f"{hashlib.sha1(data).hexdigest()}  {rel}"
            for rel, data in self.files.items())
        self.assertEqual(sorted(lines), expected)

    def test_flags_override_config(self):
        config = self.write_config("relative: true\n")
        code, lines, _ = self.run_main("--config", config, "--no-relative", self.root)
        self.assertEqual(code, 0)
        self.assertTrue(all(line.startswith(self.root) for line in lines))

    def test_empty_config_file(self):
        config = self.write_config("")
        code, lines, _ = self.run_main("--config", config, self.root)
        self.assertEqual(code, 0)
        self.assertEqual(len(lines), 3)

    def test_config_unknown_key(self):
        config = self.write_config("relative: true\ncolour: blue\n")
        code, _, err = self.run_main("--config", config, self.root)
        self.assertEqual(code, 1)
        self.assertIn("Unknown keys in config file", err)
        self.assertIn("colour", err)

    def test_config_not_a_mapping(self):
        config = self.write_config("- relative\n- digest\n")
        code, _, err = self.run_main("--config", config, self.root)
        self.assertEqual(code, 1)
        self.assertIn("must contain a mapping", err)

    def test_args_from_file(self):
        argfile = os.path.join(self.work, "args.txt")
        with open(argfile, "w") as f:
            f.write("--relative\n" + self.root + "\n")
        code, lines, _ = self.run_main("@" + argfile)
        self.assertEqual(code, 0)
        self.assertEqual(sorted(lines), sorted(self.files))

    def test_usage_error(self):
        with self.assertRaises(SystemExit) as ctx:
            self.run_main()
        self.assertEqual(ctx.exception.code, 2)


if __name__ == "__main__":
    unittest.main()
