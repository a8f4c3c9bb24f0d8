from services.message import MediaEntity, Status, UrlEntity
from services.text import (
    centering_str,
    media_urls,
    original_of,
    prepare_status,
    prepare_statuses,
    unescape_entities,
)


def test_unescape_entities():
    assert unescape_entities("a &amp;&lt;b&gt; &quot;") == 'a &<b> &quot;'


def test_centering_str():
    assert centering_str("ab", 6) == "  ab  "
    assert centering_str("ab", 5) == "  ab "
    assert centering_str("abcdef", 3) == "abcdef"


def _status(**kwargs):
    defaults = dict(id=1, user_id=10, screen_name="alice", text="")
    defaults.update(kwargs)
    return Status(**defaults)


def test_prepare_status_rewrites_original_of_retweet():
    inner = _status(
        id=2,
        text="look &amp; see https://t.co/abc https://t.co/img",
        urls=[UrlEntity("https://t.co/abc", "example.com/page")],
        media=[MediaEntity("https://t.co/img", "pic.example.com/xyz", "https://media.example.com/xyz.jpg")],
    )
    outer = _status(text="RT @alice: look", retweeted_status=_status(id=3, retweeted_status=inner))

    assert prepare_status(outer) is outer
    assert original_of(outer) is inner
    assert inner.text == "look & see example.com/page pic.example.com/xyz"
    assert outer.text == "RT @alice: look"


def test_prepare_statuses_keeps_order():
    items = [_status(id=i, text=f"{i} &gt; 0") for i in range(3)]
    out = prepare_statuses(items)
    assert [s.id for s in out] == [0, 1, 2]
    assert out[2].text == "2 > 0"


def test_media_urls():
    status = _status(media=[
        MediaEntity("u1", "d1", "https://m/1.jpg"),
        MediaEntity("u2", "d2", ""),
        MediaEntity("u3", "d3", "https://m/3.jpg"),
    ])
    assert media_urls(status) == ["https://m/1.jpg", "https://m/3.jpg"]
    assert media_urls(_status(retweeted_status=status)) == ["https://m/1.jpg", "https://m/3.jpg"]


def test_unescape_is_single_pass():
    assert unescape_entities("&amp;lt;") == "&lt;"
