from decimal import Decimal
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import IntegrityError
from django.test import TestCase
from apps.catalog.config import CatalogConfig
from apps.catalog.exceptions import (
    DuplicateResourceError,
    InvalidCommandError,
    InvalidImageNameError,
    ResourceNotFoundError,
)
from apps.catalog.pagination import PRODUCT_SORT_FIELDS, PageRequest, paginate
from apps.catalog.services import CategoryService, ProductService, calculate_special_price
from apps.catalog.storage import image_extension


class StubCategory:
    def __init__(self, category_id: int, name: str):
        self.id = category_id
        self.name = name


class StubProduct:
    def __init__(self, product_id: int, **data):
        self.id = product_id
        self.name = data['name']
        self.description = data.get('description', '')
        self.quantity = data.get('quantity', 0)
        self.price = data.get('price', Decimal('0'))
        self.discount = data.get('discount', Decimal('0'))
        self.special_price = data.get('special_price', Decimal('0'))
        self.image = data.get('image', 'default.png')
        self.category = data['category']
        self.category_id = self.category.id


class FakeCategoryRepository:
    def __init__(self):
        self._categories = {}
        self._pk = 1

    def create(self, **data):
        category = StubCategory(self._pk, data['name'])
        self._categories[self._pk] = category
        self._pk += 1
        return category

    def list(self, **filters):
        return list(self._categories.values())

    def get(self, **filters):
        return self._categories.get(filters.get('id'))

    def save(self, category):
        self._categories[category.id] = category
        return category

    def delete(self, category):
        self._categories.pop(category.id, None)
        self.deleted = category

    def name_taken(self, name, exclude_id=None):
        return any(c.name == name and c.id != exclude_id for c in self._categories.values())


class FakeProductRepository:
    def __init__(self):
        self._products = {}
        self._pk = 1
        self.saved = []

    def create(self, **data):
        product = StubProduct(self._pk, **data)
        self._products[self._pk] = product
        self._pk += 1
        return product

    def get(self, **filters):
        return self._products.get(filters.get('id'))

    def save(self, product):
        self.saved.append(product.id)
        return product

    def delete(self, product):
        self._products.pop(product.id, None)

    def name_exists_in_category(self, category, name):
        return any(p.category is category and p.name == name for p in self._products.values())

    def _page(self, products, page_request):
        field = PRODUCT_SORT_FIELDS[page_request.sort_by]
        ordered = sorted(
            products,
            key=lambda p: (getattr(p, field), p.id),
            reverse=not page_request.ascending,
        )
        return paginate(ordered, page_request)

    def page_all(self, page_request):
        return self._page(self._products.values(), page_request)

    def page_by_category(self, category, page_request):
        return self._page([p for p in self._products.values() if p.category is category], page_request)

    def page_by_name_containing(self, keyword, page_request):
        matches = [p for p in self._products.values() if keyword.lower() in p.name.lower()]
        return self._page(matches, page_request)


class FakeFileService:
    def __init__(self):
        self.calls = []

    def upload_image(self, path, image):
        self.calls.append((path, image.name))
        return f"stored{image_extension(image.name)}"


class SpecialPriceTests(TestCase):
    def test_discount_is_a_percentage_of_price(self):
        self.assertEqual(calculate_special_price(Decimal('100'), Decimal('10')), Decimal('90.00'))
        self.assertEqual(calculate_special_price(Decimal('19.99'), Decimal('0')), Decimal('19.99'))
        self.assertEqual(calculate_special_price(Decimal('50'), Decimal('100')), Decimal('0.00'))

    def test_rounds_half_up_to_cents(self):
        # 10.05 * 0.95 = 9.5475
        self.assertEqual(calculate_special_price(Decimal('10.05'), Decimal('5')), Decimal('9.55'))


class CategoryServiceUnitTests(TestCase):
    def setUp(self):
        self.repo = FakeCategoryRepository()
        self.service = CategoryService(categories=self.repo)

    def test_create_and_list(self):
        dto = self.service.create_category({'category_name': 'Books'})
        self.assertEqual(dto.category_name, 'Books')
        response = self.service.get_all_categories()
        self.assertEqual([c.category_id for c in response.content], [dto.category_id])
        self.assertEqual(response.total_elements, 1)
        self.assertEqual(response.total_pages, 1)
        self.assertTrue(response.last_page)

    def test_empty_list(self):
        response = self.service.get_all_categories()
        self.assertEqual(response.content, [])
        self.assertEqual(response.total_pages, 0)

    def test_create_race_on_unique_name_conflicts(self):
        def lost_race(**data):
            raise IntegrityError('UNIQUE constraint failed: catalog_category.name')

        self.repo.create = lost_race
        with self.assertRaises(DuplicateResourceError) as ctx:
            self.service.create_category({'category_name': 'Books'})
        self.assertIsInstance(ctx.exception.__cause__, IntegrityError)

    def test_create_duplicate_name_conflicts(self):
        self.service.create_category({'category_name': 'Books'})
        with self.assertRaises(DuplicateResourceError) as ctx:
            self.service.create_category({'categoryName': 'Books'})
        self.assertEqual(ctx.exception.status_code, 409)

    def test_update_renames(self):
        cat = self.repo.create(name='Old')
        dto = self.service.update_category({'category_name': 'New'}, cat.id)
        self.assertEqual(dto.category_id, cat.id)
        self.assertEqual(self.repo.get(id=cat.id).name, 'New')

    def test_update_keeping_own_name_is_allowed(self):
        cat = self.repo.create(name='Same')
        dto = self.service.update_category({'category_name': 'Same'}, cat.id)
        self.assertEqual(dto.category_name, 'Same')

    def test_update_missing_raises(self):
        with self.assertRaises(ResourceNotFoundError) as ctx:
            self.service.update_category({'category_name': 'X'}, 42)
        self.assertEqual(ctx.exception.message, 'Category not found with categoryId: 42')

    def test_delete_returns_message(self):
        cat = self.repo.create(name='Gone')
        message = self.service.delete_category(cat.id)
        self.assertEqual(message, f'Category with categoryId: {cat.id} deleted successfully')
        self.assertIsNone(self.repo.get(id=cat.id))

    def test_delete_missing_raises(self):
        with self.assertRaises(ResourceNotFoundError):
            self.service.delete_category(3)


class ProductServiceUnitTests(TestCase):
    def setUp(self):
        self.category_repo = FakeCategoryRepository()
        self.product_repo = FakeProductRepository()
        self.files = FakeFileService()
        self.config = CatalogConfig(image_path='/tmp/images', page_size=2)
        self.service = ProductService(
            products=self.product_repo,
            categories=self.category_repo,
            files=self.files,
            config=self.config,
        )
        self.category = self.category_repo.create(name='Electronics')

    def add(self, name, price='10.00', discount='0', quantity=1, category=None):
        category = category or self.category
        return self.service.add_product(category.id, {
            'product_name': name,
            'description': f'{name} description',
            'quantity': quantity,
            'price': price,
            'discount': discount,
        })

    def test_add_product_computes_special_price_and_default_image(self):
        dto = self.add('Phone', price='100', discount='10')
        self.assertEqual(dto.special_price, '90.00')
        self.assertEqual(dto.price, '100.00')
        self.assertEqual(dto.image, 'default.png')
        self.assertEqual(dto.category_id, self.category.id)
        self.assertEqual(dto.category_name, 'Electronics')

    def test_add_product_ignores_client_special_price_and_image(self):
        dto = self.service.add_product(self.category.id, {
            'productName': 'Tablet',
            'price': '20',
            'discount': '50',
            'specialPrice': '1.00',
            'image': 'mine.png',
        })
        self.assertEqual(dto.special_price, '10.00')
        self.assertEqual(dto.image, 'default.png')

    def test_add_product_unknown_category(self):
        with self.assertRaises(ResourceNotFoundError):
            self.service.add_product(99, {'product_name': 'Ghost', 'price': '1'})

    def test_add_race_on_unique_name_conflicts(self):
        def lost_race(**data):
            raise IntegrityError('UNIQUE constraint failed: catalog_product.category_id, catalog_product.name')

        self.product_repo.create = lost_race
        with self.assertRaises(DuplicateResourceError) as ctx:
            self.add('Phone')
        self.assertEqual(ctx.exception.status_code, 409)

    def test_update_rename_onto_existing_name_conflicts(self):
        created = self.add('Lamp')

        def clashing_save(product):
            raise IntegrityError('UNIQUE constraint failed')

        self.product_repo.save = clashing_save
        with self.assertRaises(DuplicateResourceError):
            self.service.update_product({'product_name': 'Phone', 'price': '1'}, created.product_id)

    def test_add_product_rejects_unparseable_price(self):
        with self.assertRaises(InvalidCommandError) as ctx:
            self.add('Phone', price='ten')
        self.assertEqual(ctx.exception.code, 'VALIDATION_ERROR')
        self.assertIn('price', ctx.exception.details)
        self.assertIsNone(self.product_repo.get(id=1))

    def test_add_duplicate_name_in_same_category_conflicts(self):
        self.add('Phone')
        with self.assertRaises(DuplicateResourceError):
            self.add('Phone')

    def test_same_name_allowed_in_other_category(self):
        self.add('Phone')
        other = self.category_repo.create(name='Gifts')
        dto = self.add('Phone', category=other)
        self.assertEqual(dto.category_id, other.id)

    def test_get_all_products_paginates_with_defaults(self):
        for name in ('A', 'B', 'C'):
            self.add(name)
        response = self.service.get_all_products(self.service.page_request())
        self.assertEqual([p.product_name for p in response.content], ['A', 'B'])
        self.assertEqual(response.page_size, 2)
        self.assertEqual(response.total_elements, 3)
        self.assertEqual(response.total_pages, 2)
        self.assertFalse(response.last_page)
        self.assertEqual(response.content[0].category_name, 'Electronics')

    def test_page_past_the_end(self):
        self.add('A')
        response = self.service.get_all_products(PageRequest(page_number=4, page_size=10))
        self.assertEqual(response.content, [])
        self.assertEqual(response.total_elements, 1)
        self.assertTrue(response.last_page)

    def test_sorting_by_price_descending(self):
        self.add('Cheap', price='1')
        self.add('Pricey', price='50')
        self.add('Mid', price='20')
        page_request = self.service.page_request(page_size=10, sort_by='price', sort_dir='desc')
        response = self.service.get_all_products(page_request)
        self.assertEqual([p.product_name for p in response.content], ['Pricey', 'Mid', 'Cheap'])

    def test_search_by_category(self):
        other = self.category_repo.create(name='Garden')
        self.add('Phone')
        self.add('Rake', category=other)
        response = self.service.search_by_category(other.id, self.service.page_request())
        self.assertEqual([p.product_name for p in response.content], ['Rake'])
        self.assertEqual(response.content[0].category_id, other.id)

    def test_search_by_category_honours_requested_sort(self):
        other = self.category_repo.create(name='Garden')
        self.add('B', price='5', category=other)
        self.add('A', price='50', category=other)
        self.add('C', price='20', category=other)
        self.add('Outside', price='99')
        page_request = self.service.page_request(sort_by='price', sort_dir='desc')
        response = self.service.search_by_category(other.id, page_request)
        self.assertEqual([p.product_name for p in response.content], ['A', 'C'])
        self.assertEqual(response.total_elements, 3)

        response = self.service.search_by_category(other.id, self.service.page_request(page_size=10))
        self.assertEqual([p.product_name for p in response.content], ['B', 'A', 'C'])

    def test_search_by_missing_category(self):
        with self.assertRaises(ResourceNotFoundError):
            self.service.search_by_category(77, self.service.page_request())

    def test_keyword_search_is_case_insensitive_and_has_no_category(self):
        self.add('Red Shirt')
        self.add('Blue shirt')
        self.add('Hat')
        response = self.service.search_product_by_keyword('SHIRT', self.service.page_request(page_size=10))
        self.assertEqual([p.product_name for p in response.content], ['Red Shirt', 'Blue shirt'])
        self.assertTrue(all(p.category_id is None for p in response.content))

    def test_update_product_recomputes_special_price(self):
        created = self.add('Lamp', price='10', discount='0')
        dto = self.service.update_product({
            'product_name': 'Lamp XL',
            'description': 'bigger',
            'quantity': 5,
            'price': Decimal('40'),
            'discount': Decimal('25'),
        }, created.product_id)
        self.assertEqual(dto.product_name, 'Lamp XL')
        self.assertEqual(dto.quantity, 5)
        self.assertEqual(dto.special_price, '30.00')
        self.assertEqual(dto.image, 'default.png')
        self.assertIn(created.product_id, self.product_repo.saved)

    def test_update_missing_product(self):
        with self.assertRaises(ResourceNotFoundError) as ctx:
            self.service.update_product({'product_name': 'X', 'price': '1'}, 404)
        self.assertEqual(ctx.exception.details['value'], 404)

    def test_delete_product_returns_snapshot(self):
        created = self.add('Mug')
        dto = self.service.delete_product(created.product_id)
        self.assertEqual(dto.product_id, created.product_id)
        self.assertEqual(dto.product_name, 'Mug')
        self.assertIsNone(self.product_repo.get(id=created.product_id))

    def test_delete_missing_product(self):
        with self.assertRaises(ResourceNotFoundError):
            self.service.delete_product(1)

    def test_update_product_image(self):
        created = self.add('Poster')
        upload = SimpleUploadedFile('photo.JPG', b'data', content_type='image/jpeg')
        dto = self.service.update_product_image(created.product_id, upload)
        self.assertEqual(dto.image, 'stored.JPG')
        self.assertEqual(self.files.calls, [('/tmp/images', 'photo.JPG')])

    def test_update_image_for_missing_product_does_not_store(self):
        upload = SimpleUploadedFile('photo.png', b'data')
        with self.assertRaises(ResourceNotFoundError):
            self.service.update_product_image(5, upload)
        self.assertEqual(self.files.calls, [])

    def test_update_image_without_extension(self):
        created = self.add('Poster')
        with self.assertRaises(InvalidImageNameError):
            self.service.update_product_image(created.product_id, SimpleUploadedFile('photo', b'data'))
