from rolodex.services.address_book_resolver import AddressBookResolver


def test_principal_uri():
    assert AddressBookResolver.principal_uri("alice") == "principals/users/alice"


def test_creates_contacts_book_for_fresh_user(memory_backend):
    resolver = AddressBookResolver(memory_backend)

    book_id = resolver.resolve_or_create_default("alice")

    books = resolver.list_for_user("alice")
    assert [(b.id, b.uri, b.display_name) for b in books] == [(book_id, "contacts", "Contacts")]
    assert books[0].principal_uri == "principals/users/alice"


def test_resolve_twice_creates_one_book(memory_backend):
    resolver = AddressBookResolver(memory_backend)

    first = resolver.resolve_or_create_default("alice")
    second = resolver.resolve_or_create_default("alice")

    assert first == second
    assert len(resolver.list_for_user("alice")) == 1
    assert memory_backend.calls.count("create_address_book") == 1


def test_prefers_contacts_book_over_earlier_books(memory_backend):
    memory_backend.create_address_book("principals/users/alice", "work", {})
    contacts_id = memory_backend.create_address_book("principals/users/alice", "contacts", {})

    assert AddressBookResolver(memory_backend).resolve_or_create_default("alice") == contacts_id


def test_falls_back_to_first_listed_book(memory_backend):
    work_id = memory_backend.create_address_book("principals/users/alice", "work", {})
    memory_backend.create_address_book("principals/users/alice", "family", {})

    resolver = AddressBookResolver(memory_backend)

    assert resolver.resolve_or_create_default("alice") == work_id
    # No ``contacts`` book is created when another one exists
    assert [b.uri for b in resolver.list_for_user("alice")] == ["work", "family"]


def test_books_are_scoped_per_user(memory_backend):
    resolver = AddressBookResolver(memory_backend)

    alice_book = resolver.resolve_or_create_default("alice")
    bob_book = resolver.resolve_or_create_default("bob")

    assert alice_book != bob_book
    assert [b.id for b in resolver.list_for_user("alice")] == [alice_book]
    assert resolver.list_for_user("nobody") == []
