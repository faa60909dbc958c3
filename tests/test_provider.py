# tests/test_provider.py
import json
import subprocess
import pytest
from pathlib import Path

from yekstat.core import provider as provider_module
from yekstat.core.clipboard import ClipboardError, copy_text, flatten_contents, paste_text
from yekstat.core.filtering import build_exclude_spec, exclude_files
from yekstat.core.provider import ToolInvocationError, YekStatsProvider, count_lines
from yekstat.models import FileStat
from yekstat.utils.tokenizer import Tokenizer, approximate_tokens

YEK_OUTPUT = [
    {"filename": "src/main.rs", "content": "fn main() {\n    println!(\"hi\");\n}\n"},
    {"filename": "TODO.md", "content": "- [ ] ship it"},
]

def fake_run(stdout="", returncode=0, stderr="", calls=None):
    def _run(cmd, **kwargs):
        if calls is not None:
            calls.append((cmd, kwargs))
        return subprocess.CompletedProcess(cmd, returncode, stdout=stdout, stderr=stderr)
    return _run

# --- Tokenizer ---

def test_approximate_tokens():
    assert approximate_tokens("") == 0
    assert approximate_tokens("abcdefgh") == 2
    assert Tokenizer("approx").count("abcdefghijk") == 2

def test_tokenizer_rejects_unknown_mode():
    with pytest.raises(ValueError):
        Tokenizer("words")

class FakeEncoding:
    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def encode(self, text, disallowed_special=None):
        self.calls.append((text, disallowed_special))
        if self.fail:
            raise ValueError("encoding unavailable")
        return text.split()

def test_tiktoken_mode_uses_encoding(monkeypatch):
    encoding = FakeEncoding()
    monkeypatch.setattr(Tokenizer, "_encoding", encoding)

    assert Tokenizer("tiktoken").count("fn main <|endoftext|> done") == 4
    assert encoding.calls == [("fn main <|endoftext|> done", ())]

def test_tiktoken_mode_falls_back_to_estimate(monkeypatch):
    monkeypatch.setattr(Tokenizer, "_encoding", FakeEncoding(fail=True))

    assert Tokenizer("tiktoken").count("abcdefghijkl") == 3

# --- YekStatsProvider ---

def test_collect_parses_yek_json(monkeypatch, tmp_path):
    calls = []
    monkeypatch.setattr(provider_module.subprocess, "run", fake_run(json.dumps(YEK_OUTPUT), calls=calls))

    stats = YekStatsProvider().collect(tmp_path)

    assert [s.path for s in stats] == ["src/main.rs", "TODO.md"]
    main_rs = stats[0]
    content = YEK_OUTPUT[0]["content"]
    assert main_rs.byte_size == len(content.encode("utf-8"))
    assert main_rs.line_count == 3
    assert main_rs.token_estimate == len(content) // 4
    assert main_rs.content == content

    cmd, kwargs = calls[0]
    assert cmd == ["yek", "--json", "."]
    assert kwargs["cwd"] == tmp_path

def test_byte_size_counts_utf8(monkeypatch, tmp_path):
    output = json.dumps([{"filename": "notes.txt", "content": "héllo"}])
    monkeypatch.setattr(provider_module.subprocess, "run", fake_run(output))

    stat = YekStatsProvider().collect(tmp_path)[0]

    assert stat.byte_size == 6
    assert stat.line_count == 1

def test_count_lines_splits_on_newline_only():
    assert count_lines("") == 0
    assert count_lines("\n") == 1
    assert count_lines("one") == 1
    assert count_lines("a\r\nb\r\n") == 2
    assert count_lines("a\x0cb\nc\u2028d\n") == 2

def test_line_count_ignores_form_feeds(monkeypatch, tmp_path):
    output = json.dumps([{"filename": "a.c", "content": "a\x0cb\r\nc\u2028d\n"}])
    monkeypatch.setattr(provider_module.subprocess, "run", fake_run(output))

    assert YekStatsProvider().collect(tmp_path)[0].line_count == 2

def test_missing_executable(monkeypatch, tmp_path):
    def _raise(cmd, **kwargs):
        raise FileNotFoundError(2, "No such file or directory", cmd[0])
    monkeypatch.setattr(provider_module.subprocess, "run", _raise)

    with pytest.raises(ToolInvocationError, match="Is 'yek-missing' in your PATH"):
        YekStatsProvider("yek-missing").collect(tmp_path)

def test_nonzero_exit(monkeypatch, tmp_path):
    monkeypatch.setattr(provider_module.subprocess, "run", fake_run(returncode=2, stderr="boom"))

    with pytest.raises(ToolInvocationError, match="failed with status 2") as excinfo:
        YekStatsProvider().collect(tmp_path)
    assert "boom" in str(excinfo.value)

@pytest.mark.parametrize("stdout", [
    "not json",
    json.dumps({"filename": "a", "content": "b"}),
    json.dumps([{"filename": "a"}]),
    json.dumps(["a.txt"]),
])
def test_malformed_output(monkeypatch, tmp_path, stdout):
    monkeypatch.setattr(provider_module.subprocess, "run", fake_run(stdout))

    with pytest.raises(ToolInvocationError):
        YekStatsProvider().collect(tmp_path)

def test_empty_output_is_valid(monkeypatch, tmp_path):
    monkeypatch.setattr(provider_module.subprocess, "run", fake_run("[]"))
    assert YekStatsProvider().collect(tmp_path) == []

# --- Filtering ---

def test_exclude_files():
    files = [
        FileStat("src/main.rs", 1, 1, 1),
        FileStat("target/debug/build.log", 1, 1, 1),
        FileStat("Cargo.lock", 1, 1, 1),
    ]
    spec = build_exclude_spec(["target/", "*.lock"])

    assert [f.path for f in exclude_files(files, spec)] == ["src/main.rs"]
    assert exclude_files(files, build_exclude_spec([])) == files
    assert build_exclude_spec(["", "  "]) is None

# --- Clipboard ---

def test_copy_text(monkeypatch):
    copied = []
    monkeypatch.setattr("pyperclip.copy", copied.append)

    copy_text("hello")

    assert copied == ["hello"]

def test_copy_text_failure(monkeypatch):
    import pyperclip

    def _fail(text):
        raise pyperclip.PyperclipException("no copy/paste mechanism")
    monkeypatch.setattr("pyperclip.copy", _fail)

    with pytest.raises(ClipboardError, match="no copy/paste mechanism"):
        copy_text("hello")

def test_copy_text_os_error(monkeypatch):
    def _fail(text):
        raise OSError("xclip exited")
    monkeypatch.setattr("pyperclip.copy", _fail)

    with pytest.raises(ClipboardError, match="xclip exited"):
        copy_text("hello")

def test_paste_text(monkeypatch):
    monkeypatch.setattr("pyperclip.paste", lambda: "/tmp/project")
    assert paste_text() == "/tmp/project"

def test_flatten_contents():
    files = [
        FileStat("src/main.rs", 3, 0, 1, content="fn"),
        FileStat("no_content.txt", 0, 0, 0),
        FileStat("TODO.md", 4, 1, 1, content="todo"),
    ]
    assert flatten_contents(files) == ">>>> src/main.rs\nfn\n>>>> TODO.md\ntodo"
