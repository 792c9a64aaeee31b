import io

from termsurvey.terminal.sequences import (
    COORDINATE_SYSTEM_BEGIN,
    Coord,
    EraseLineMode,
    InterruptError,
    Stdio,
    erase_line,
    sound_bell,
)


def test_erase_line_all():
    out = io.StringIO()
    erase_line(out, EraseLineMode.ALL)
    assert out.getvalue() == "\x1b[2K"


def test_erase_line_modes_differ():
    outputs = []
    for mode in EraseLineMode:
        out = io.StringIO()
        erase_line(out, mode)
        value = out.getvalue()
        assert value.startswith("\x1b[")
        assert value.endswith("K")
        outputs.append(value)
    assert len(set(outputs)) == len(list(EraseLineMode))


def test_erase_line_end_mode_number():
    out = io.StringIO()
    erase_line(out, EraseLineMode.END)
    assert out.getvalue() == "\x1b[0K"


def test_sound_bell():
    out = io.StringIO()
    sound_bell(out)
    assert out.getvalue() == "\a"


def test_interrupt_error_message():
    err = InterruptError()
    assert str(err) == "interrupt"
    assert isinstance(err, BaseException)


def test_coord_at_line_end():
    size = Coord(80, 24)
    assert Coord(80, 3).cursor_is_at_line_end(size)
    assert not Coord(79, 3).cursor_is_at_line_end(size)


def test_coord_at_line_begin():
    assert Coord(COORDINATE_SYSTEM_BEGIN, 5).cursor_is_at_line_begin()
    assert not Coord(COORDINATE_SYSTEM_BEGIN + 1, 5).cursor_is_at_line_begin()


def test_coord_is_mutable():
    c = Coord(3, 4)
    c.x += 1
    c.y -= 1
    assert c == Coord(4, 3)


def test_stdio_keeps_streams():
    a, b, c = io.StringIO(), io.StringIO(), io.StringIO()
    stdio = Stdio(in_=a, out=b, err=c)
    erase_line(stdio.out, EraseLineMode.ALL)
    assert b.getvalue() == "\x1b[2K"
    assert stdio.in_ is a
    assert stdio.err is c