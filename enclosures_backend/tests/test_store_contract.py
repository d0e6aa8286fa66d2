import threading
import time
import unittest
from datetime import datetime, timedelta, timezone

from enclosures_backend.blob_storage import InMemoryBlobStorageClient
from enclosures_backend.memory_store import InMemoryContentStore
from enclosures_backend.object_store import ObjectContentStore
from enclosures_backend.schemas import (
    BlogPostCreate,
    BlogPostUpdate,
    ContactMessageCreate,
    ProductCreate,
    ProductUpdate,
    ServiceCreate,
    ServiceUpdate,
    UserCreate,
)
from enclosures_backend.seed import seed_demo_data, seed_if_empty
from enclosures_backend.sql_store import SqlContentStore
from enclosures_backend.store import UniqueConstraintError


def _service(slug: str, **extra) -> ServiceCreate:
    return ServiceCreate(name=slug.title(), slug=slug, description=f"{slug} work", **extra)


class ContentStoreContract:
    """
    Behaviour every content store must share. Subclasses provide ``make_store``.
    """

    def make_store(self):
        raise NotImplementedError

    def setUp(self):
        self.store = self.make_store()

    # Users

    def test_user_roundtrip_and_unique_username(self):
        user = self.store.create_user(UserCreate(username="editor", password="pw"))
        self.assertEqual(self.store.get_user(user.id), user)
        self.assertEqual(self.store.get_user_by_username("editor").id, user.id)
        self.assertIsNone(self.store.get_user_by_username("nobody"))
        with self.assertRaises(UniqueConstraintError):
            self.store.create_user(UserCreate(username="editor", password="other"))

    # Products

    def test_product_create_then_get(self):
        product = self.store.create_product(
            ProductCreate(name="Wall Box", slug="wall-box", description="Steel")
        )
        self.assertEqual(self.store.get_product_by_id(product.id), product)
        self.assertEqual(self.store.get_product_by_slug("wall-box"), product)
        self.assertFalse(product.featured)
        self.assertIsNotNone(product.created_at.tzinfo)

    def test_delete_then_missing(self):
        product = self.store.create_product(
            ProductCreate(name="Wall Box", slug="wall-box", description="Steel")
        )
        self.assertTrue(self.store.delete_product(product.id))
        self.assertIsNone(self.store.get_product_by_id(product.id))
        self.assertFalse(self.store.delete_product(product.id))
        self.assertFalse(self.store.delete_product(9999))

    def test_update_keeps_absent_fields(self):
        product = self.store.create_product(
            ProductCreate(
                name="Wall Box",
                slug="wall-box",
                description="Steel",
                category="Standard",
            )
        )
        updated = self.store.update_product(product.id, ProductUpdate(featured=True))
        self.assertTrue(updated.featured)
        self.assertEqual(updated.name, "Wall Box")
        self.assertEqual(updated.category, "Standard")
        self.assertEqual(self.store.get_product_by_id(product.id), updated)

    def test_update_unknown_returns_none(self):
        self.assertIsNone(self.store.update_product(42, ProductUpdate(name="x")))

    def test_featured_products(self):
        self.store.create_product(
            ProductCreate(name="A", slug="a", description="a", featured=True)
        )
        self.store.create_product(ProductCreate(name="B", slug="b", description="b"))
        self.assertEqual([p.slug for p in self.store.get_featured_products()], ["a"])

    def test_duplicate_slug_rejected(self):
        first = self.store.create_product(
            ProductCreate(name="A", slug="shared", description="a")
        )
        with self.assertRaises(UniqueConstraintError):
            self.store.create_product(
                ProductCreate(name="B", slug="shared", description="b")
            )
        other = self.store.create_product(
            ProductCreate(name="C", slug="other", description="c")
        )
        with self.assertRaises(UniqueConstraintError):
            self.store.update_product(other.id, ProductUpdate(slug="shared"))
        # Re-saving a row with its own slug is not a conflict.
        self.store.update_product(first.id, ProductUpdate(slug="shared"))
        self.assertEqual(len(self.store.get_products()), 2)

    # Blog posts

    def test_draft_post_timestamps(self):
        post = self.store.create_blog_post(
            BlogPostCreate(title="Hello", slug="hello", content="Body")
        )
        fetched = self.store.get_blog_post_by_slug("hello")
        self.assertEqual(fetched.status, "draft")
        self.assertEqual(fetched.created_at, fetched.updated_at)
        self.assertIsNotNone(fetched.publish_date)
        self.assertEqual(fetched.author, "Admin")

        updated = self.store.update_blog_post(
            post.id, BlogPostUpdate(status="published")
        )
        self.assertEqual(updated.status, "published")
        self.assertEqual(updated.title, "Hello")
        self.assertGreater(updated.updated_at, updated.created_at)
        self.assertEqual(updated.created_at, post.created_at)

    def test_blog_posts_newest_publish_date_first(self):
        for slug, date in [
            ("old", "2023-01-15T00:00:00Z"),
            ("newest", "2023-03-08T00:00:00Z"),
            ("middle", "2023-02-20T00:00:00Z"),
        ]:
            self.store.create_blog_post(
                BlogPostCreate(title=slug, slug=slug, content="x", publishDate=date)
            )
        self.assertEqual(
            [p.slug for p in self.store.get_blog_posts()], ["newest", "middle", "old"]
        )

    # Services

    def test_children_sorted_by_order(self):
        parent = self.store.create_service(_service("main"))
        for slug, order in [("third", 3), ("first", 1), ("second", 2)]:
            self.store.create_service(_service(slug, parent_id=parent.id, order=order))
        children = self.store.get_services_by_parent_id(parent.id)
        self.assertEqual([c.slug for c in children], ["first", "second", "third"])

    def test_parent_partition(self):
        seed_demo_data(self.store)
        services = self.store.get_services()
        mains = self.store.get_services_by_parent_id(None)
        grouped = list(mains)
        for main in mains:
            grouped.extend(self.store.get_services_by_parent_id(main.id))
        self.assertEqual(sorted(s.id for s in grouped), sorted(s.id for s in services))
        self.assertEqual(len(services), len(grouped))

    def test_hierarchy_is_one_level(self):
        seed_demo_data(self.store)
        hierarchy = self.store.get_service_hierarchy()
        self.assertEqual(len(hierarchy), 3)
        self.assertEqual(
            [s.name for s in hierarchy],
            ["Standard Enclosures", "Custom Solutions", "Modification Services"],
        )
        for main in hierarchy:
            self.assertEqual(len(main.children), 3)
            for child in main.children:
                self.assertIsNone(child.children)
                self.assertEqual(child.parent_id, main.id)
        # Stored rows are untouched by the hierarchy fetch.
        self.assertIsNone(self.store.get_service_by_id(hierarchy[0].id).children)

    def test_hierarchy_never_recurses_into_grandchildren(self):
        main = self.store.create_service(_service("main"))
        child = self.store.create_service(_service("child", parent_id=main.id))
        self.store.create_service(_service("grandchild", parent_id=child.id))
        hierarchy = self.store.get_service_hierarchy()
        self.assertEqual([s.slug for s in hierarchy], ["main"])
        self.assertEqual([c.slug for c in hierarchy[0].children], ["child"])
        self.assertIsNone(hierarchy[0].children[0].children)

    def test_related_skips_deleted(self):
        a = self.store.create_service(_service("a"))
        b = self.store.create_service(_service("b"))
        source = self.store.create_service(
            _service("source", related_services=[b.id, a.id])
        )
        self.assertEqual(
            [s.slug for s in self.store.get_related_services(source.id)], ["b", "a"]
        )
        self.store.delete_service(a.id)
        related = self.store.get_related_services(source.id)
        self.assertEqual([s.slug for s in related], ["b"])
        self.assertEqual(self.store.get_related_services(9999), [])

    def test_update_service_specifications(self):
        service = self.store.create_service(_service("ip-rated"))
        updated = self.store.update_service(
            service.id, ServiceUpdate(specifications={"IP rating": "IP66"})
        )
        self.assertEqual(updated.specifications, {"IP rating": "IP66"})
        self.assertEqual(
            self.store.get_service_by_slug("ip-rated").specifications,
            {"IP rating": "IP66"},
        )

    # Full-row round trips

    def test_service_roundtrip(self):
        parent = self.store.create_service(_service("parent"))
        service = self.store.create_service(
            _service(
                "cabinet",
                full_description="<p>Floor standing</p>",
                image="/images/cabinet.jpg",
                featured=True,
                parent_id=parent.id,
                order=2,
                features=["IP66", "Lockable"],
                benefits=["Durable"],
                applications=["Outdoor"],
                specifications={"Material": "Steel", "IP rating": "IP66"},
                related_services=[parent.id],
                meta_title="Cabinets",
                meta_description="Floor standing cabinets",
            )
        )
        self.assertIsNone(service.children)
        self.assertEqual(self.store.get_service_by_id(service.id), service)
        self.assertEqual(self.store.get_service_by_slug("cabinet"), service)

    def test_blog_post_roundtrip(self):
        post = self.store.create_blog_post(
            BlogPostCreate(
                title="Gaskets",
                slug="gaskets",
                content="<p>Seals</p>",
                excerpt="Seals",
                status="published",
                images=["/uploads/a.png"],
                categories=["Guides"],
                tags=["ip", "seals"],
                meta_title="Gaskets",
            )
        )
        self.assertEqual(self.store.get_blog_post_by_id(post.id), post)
        self.assertEqual(self.store.get_blog_post_by_slug("gaskets"), post)

    def test_publish_date_offset_stored_as_utc(self):
        post = self.store.create_blog_post(
            BlogPostCreate(
                title="Offset",
                slug="offset",
                content="x",
                publishDate="2023-01-15T10:00:00+05:00",
            )
        )
        expected = datetime(2023, 1, 15, 5, 0, tzinfo=timezone.utc)
        fetched = self.store.get_blog_post_by_id(post.id)
        self.assertEqual(fetched.publish_date, expected)
        self.assertEqual(fetched.publish_date.utcoffset(), timedelta(0))
        self.assertEqual(fetched.publish_date.hour, 5)

    def test_contact_message_roundtrip(self):
        message = self.store.create_contact_message(
            ContactMessageCreate(
                name="Ann", email="ann@example.com", message="Quote", phone="0123"
            )
        )
        self.assertEqual(self.store.get_contact_messages(), [message])

    # Contact messages

    def test_contact_message_lifecycle(self):
        first = self.store.create_contact_message(
            ContactMessageCreate(name="A", email="a@example.com", message="Hi")
        )
        second = self.store.create_contact_message(
            ContactMessageCreate(
                name="B", email="b@example.com", message="Quote", phone="123"
            )
        )
        self.assertFalse(first.read)
        inbox = self.store.get_contact_messages()
        self.assertEqual([m.id for m in inbox], [second.id, first.id])

        marked = self.store.mark_contact_message_as_read(first.id)
        self.assertTrue(marked.read)
        self.assertEqual(marked.message, "Hi")
        self.assertIsNone(self.store.mark_contact_message_as_read(9999))

        self.assertTrue(self.store.delete_contact_message(first.id))
        self.assertFalse(self.store.delete_contact_message(first.id))
        self.assertEqual([m.id for m in self.store.get_contact_messages()], [second.id])

    # Seeding

    def test_seed_if_empty_runs_once(self):
        self.assertTrue(seed_if_empty(self.store))
        self.assertFalse(seed_if_empty(self.store))
        self.assertEqual(len(self.store.get_services()), 12)
        self.assertEqual(len(self.store.get_featured_products()), 4)
        self.assertEqual(self.store.get_user_by_username("admin").password, "admin123")


class InMemoryContentStoreTests(ContentStoreContract, unittest.TestCase):
    def make_store(self):
        return InMemoryContentStore(seed=False)

    def test_seeded_by_default(self):
        store = InMemoryContentStore()
        self.assertEqual(len(store.get_services_by_parent_id(None)), 3)
        store.reset()
        self.assertEqual(store.get_services(), [])
        created = store.create_product(ProductCreate(name="A", slug="a", description="a"))
        self.assertEqual(created.id, 1)


class ObjectContentStoreTests(ContentStoreContract, unittest.TestCase):
    def make_store(self):
        self.blobs = InMemoryBlobStorageClient()
        return ObjectContentStore(self.blobs, prefix="site/")

    def test_key_layout(self):
        self.store.create_product(ProductCreate(name="A", slug="a", description="a"))
        self.store.create_product(ProductCreate(name="B", slug="b", description="b"))
        self.assertIn("site/products/1.json", self.blobs.stored_objects)
        self.assertIn("site/products/2.json", self.blobs.stored_objects)
        self.assertEqual(self.blobs.stored_objects["site/counters.json"], {"products": 2})
        self.assertEqual(self.blobs.stored_objects["site/products/1.json"]["slug"], "a")

    def test_ids_not_reused_after_delete(self):
        a = self.store.create_product(ProductCreate(name="A", slug="a", description="a"))
        self.store.delete_product(a.id)
        b = self.store.create_product(ProductCreate(name="B", slug="b", description="b"))
        self.assertEqual(b.id, a.id + 1)

    def test_unrelated_keys_are_ignored(self):
        self.store.create_product(ProductCreate(name="A", slug="a", description="a"))
        self.blobs.upload_json("site/products/readme.txt", {"note": "ignore me"})
        self.assertEqual([p.slug for p in self.store.get_products()], ["a"])

    def test_concurrent_creates_keep_slug_unique(self):
        class SlowListingClient(InMemoryBlobStorageClient):
            def list_paths(self, prefix: str) -> list[str]:
                paths = super().list_paths(prefix)
                time.sleep(0.05)
                return paths

        store = ObjectContentStore(SlowListingClient())
        errors = []

        def create():
            try:
                store.create_product(
                    ProductCreate(name="Dup", slug="dup", description="x")
                )
            except UniqueConstraintError as e:
                errors.append(e)

        threads = [threading.Thread(target=create) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual([p.slug for p in store.get_products()], ["dup"])
        self.assertEqual(len(errors), 1)


class SqlContentStoreTests(ContentStoreContract, unittest.TestCase):
    """
    Uses SQLite via SQLAlchemy URL for fast/local testing of the relational store.
    """

    def make_store(self):
        return SqlContentStore("sqlite+pysqlite:///:memory:")

    def test_requires_database_url(self):
        with self.assertRaises(ValueError):
            SqlContentStore("")


if __name__ == "__main__":
    unittest.main()
