from focus_timer.toast import TOAST_TIMEOUT_MS, ToastController


def test_default_timeout_is_three_seconds():
    assert TOAST_TIMEOUT_MS == 3000


def test_toast_auto_dismisses(qtbot):
    toast = ToastController(timeout_ms=30)
    seen = []
    toast.message_changed.connect(seen.append)
    toast.show("Reset.")
    assert toast.message == "Reset."
    qtbot.waitUntil(lambda: toast.message == "", timeout=1000)
    assert seen == ["Reset.", ""]


def test_newer_toast_replaces_and_restarts_timer(qtbot):
    toast = ToastController(timeout_ms=300)
    toast.show("first")
    qtbot.wait(200)
    toast.show("second")
    qtbot.wait(200)
    # the first toast's dismissal must not clear the second one
    assert toast.message == "second"
    qtbot.waitUntil(lambda: toast.message == "", timeout=1000)


def test_dismiss_cancels_timer(qtbot):
    toast = ToastController(timeout_ms=1000)
    toast.show("hello")
    toast.dismiss()
    assert toast.message == ""
    assert not toast.active
