from pagination import MAX_PAGE_SIZE, Page, PageRequest

def test_defaults():
    request = PageRequest()
    assert request.page == 0
    assert request.size == 20
    assert request.sort is None
    assert request.ascending is True
    assert request.offset == 0

def test_negative_page_is_clamped_to_zero():
    assert PageRequest.of(page=-5, size=10).page == 0

def test_size_is_clamped_into_range():
    assert PageRequest.of(page=0, size=0).size == 1
    assert PageRequest.of(page=0, size=-3).size == 1
    assert PageRequest.of(page=0, size=10_000).size == MAX_PAGE_SIZE
    assert PageRequest.of(page=0, size=500, max_size=50).size == 50

def test_direct_construction_is_clamped_too():
    request = PageRequest(page=-1, size=10_000)
    assert request.page == 0
    assert request.size == MAX_PAGE_SIZE

def test_configured_max_size_can_exceed_module_default():
    assert PageRequest.of(page=0, size=150, max_size=200).size == 150
    assert PageRequest.of(page=0, size=500, max_size=200).size == 200

def test_huge_page_keeps_offset_in_64_bit_range():
    request = PageRequest.of(page=10**17, size=100)
    assert request.page > 0
    assert request.offset + request.size <= 2**63 - 1

def test_missing_size_uses_default():
    assert PageRequest.of(page=1, size=None, default_size=7).size == 7

def test_offset():
    assert PageRequest.of(page=3, size=15).offset == 45

def test_sort_key_allowlist():
    allowed = {"title", "author"}
    assert PageRequest(sort="title").sort_key(allowed) == "title"
    assert PageRequest(sort="  Author ").sort_key(allowed) == "author"
    assert PageRequest(sort="password").sort_key(allowed) is None
    assert PageRequest(sort="title; DROP TABLE books").sort_key(allowed) is None
    assert PageRequest(sort="").sort_key(allowed) is None
    assert PageRequest().sort_key(allowed) is None

def test_total_pages():
    assert Page[int](items=[], total=0, page=0, size=10).total_pages == 0
    assert Page[int](items=[1], total=1, page=0, size=10).total_pages == 1
    assert Page[int](items=list(range(10)), total=21, page=0, size=10).total_pages == 3
