from fcitxbus.proxies import BusConnection
from fcitxbus.watcher import MAIN_SERVICE_NAME, PORTAL_SERVICE_NAME, Watcher


def _recorder(watcher):
    events = []
    watcher.availability_changed.connect(events.append)
    return events


def test_unwatched_watcher_is_unavailable():
    watcher = Watcher(BusConnection())
    assert watcher.availability() is False
    assert watcher.service_name() == ""
    assert watcher.is_watching() is False


def test_watch_sees_registered_main_service():
    conn = BusConnection()
    peer = conn.new_peer()
    conn.request_name(MAIN_SERVICE_NAME, peer)
    watcher = Watcher(conn)
    events = _recorder(watcher)
    watcher.watch()
    assert watcher.is_watching() is True
    assert watcher.availability() is True
    assert watcher.service_name() == "org.fcitx.Fcitx5"
    assert events == [True]


def test_name_changes_after_watch_update_availability():
    conn = BusConnection()
    watcher = Watcher(conn)
    events = _recorder(watcher)
    watcher.watch()
    assert watcher.availability() is False
    peer = conn.new_peer()
    conn.request_name(MAIN_SERVICE_NAME, peer)
    assert watcher.availability() is True
    conn.release_name(MAIN_SERVICE_NAME)
    assert watcher.availability() is False
    assert events == [True, False]


def test_portal_ignored_unless_watched():
    conn = BusConnection()
    peer = conn.new_peer()
    conn.request_name(PORTAL_SERVICE_NAME, peer)
    watcher = Watcher(conn)
    watcher.watch()
    assert watcher.availability() is False
    assert watcher.service_name() == ""


def test_portal_counts_when_watched():
    conn = BusConnection()
    peer = conn.new_peer()
    conn.request_name(PORTAL_SERVICE_NAME, peer)
    watcher = Watcher(conn, watch_portal=True)
    watcher.watch()
    assert watcher.availability() is True
    assert watcher.service_name() == "org.freedesktop.portal.Fcitx"


def test_main_service_preferred_over_portal():
    conn = BusConnection()
    peer = conn.new_peer()
    conn.request_name(PORTAL_SERVICE_NAME, peer)
    conn.request_name(MAIN_SERVICE_NAME, peer)
    watcher = Watcher(conn, watch_portal=True)
    watcher.watch()
    assert watcher.service_name() == MAIN_SERVICE_NAME
    conn.release_name(MAIN_SERVICE_NAME)
    assert watcher.service_name() == PORTAL_SERVICE_NAME
    assert watcher.availability() is True


def test_unwatch_drops_availability_and_ignores_changes():
    conn = BusConnection()
    peer = conn.new_peer()
    conn.request_name(MAIN_SERVICE_NAME, peer)
    watcher = Watcher(conn)
    events = _recorder(watcher)
    watcher.watch()
    watcher.unwatch()
    assert watcher.is_watching() is False
    assert watcher.availability() is False
    assert events == [True, False]
    conn.release_name(MAIN_SERVICE_NAME)
    conn.request_name(MAIN_SERVICE_NAME, peer)
    assert watcher.availability() is False
    assert events == [True, False]


def test_watch_twice_connects_once():
    conn = BusConnection()
    watcher = Watcher(conn)
    before = len(conn.name_owner_changed)
    watcher.watch()
    watcher.watch()
    assert len(conn.name_owner_changed) == before + 1
    watcher.unwatch()
    assert len(conn.name_owner_changed) == before


def test_unrelated_names_do_not_emit():
    conn = BusConnection()
    watcher = Watcher(conn)
    events = _recorder(watcher)
    watcher.watch()
    watcher.on_name_owner_changed("org.example.Other", "", ":1.9")
    assert events == []
    assert watcher.availability() is False


def test_direct_owner_change_on_main_service():
    watcher = Watcher(BusConnection())
    watcher.on_name_owner_changed(MAIN_SERVICE_NAME, "", ":1.5")
    assert watcher.availability() is True
    watcher.on_name_owner_changed(MAIN_SERVICE_NAME, ":1.5", "")
    assert watcher.availability() is False