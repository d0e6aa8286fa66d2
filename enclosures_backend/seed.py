"""
Demo content loaded into a fresh store: the admin account, the three main
services with three sub-services each, the featured products and the
launch blog posts.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from enclosures_backend.schemas import (
    BlogPostCreate,
    ProductCreate,
    ServiceCreate,
    UserCreate,
)
from enclosures_backend.store import ContentStore

logger = logging.getLogger(__name__)

ADMIN_USER = {"username": "admin", "password": "admin123"}

MAIN_SERVICES = [
    {
        "name": "Standard Enclosures",
        "slug": "standard-enclosures",
        "description": "Our range of standard enclosures provide robust and reliable solutions for various industrial applications.",
        "full_description": "<p>Total Enclosures offers a comprehensive range of standard enclosures designed to meet diverse industrial needs. Our catalog includes various materials, sizes, and protection ratings to ensure you find the perfect solution for your application.</p>",
        "image": "/images/services/standard-enclosures.jpg",
        "featured": True,
        "order": 1,
        "meta_title": "Standard Industrial Enclosures | Total Enclosures",
        "meta_description": "Browse our comprehensive range of high-quality standard industrial enclosures including metal, stainless steel, and plastic options.",
    },
    {
        "name": "Custom Solutions",
        "slug": "custom-solutions",
        "description": "We design and manufacture bespoke enclosure solutions tailored to your specific requirements and specifications.",
        "full_description": "<p>When standard enclosures don't meet your unique requirements, our custom solutions provide the perfect answer. We work closely with you to design and manufacture enclosures that precisely match your specifications.</p>",
        "image": "/images/services/custom-solutions.jpg",
        "featured": True,
        "order": 2,
        "meta_title": "Custom Enclosure Solutions | Total Enclosures",
        "meta_description": "Get custom-designed industrial enclosures tailored to your exact specifications.",
    },
    {
        "name": "Modification Services",
        "slug": "modification-services",
        "description": "Our comprehensive modification services include cutting, drilling, painting, and customizing existing enclosures.",
        "full_description": "<p>Our comprehensive modification services transform standard enclosures to meet your specific requirements, from custom cutouts to special finishes.</p>",
        "image": "/images/services/modification-services.jpg",
        "featured": True,
        "order": 3,
        "meta_title": "Enclosure Modification Services | Total Enclosures",
        "meta_description": "Professional modification services for industrial enclosures: precision cutting, drilling, painting and more.",
    },
]

# Keyed by the slug of the parent service.
SUB_SERVICES = {
    "standard-enclosures": [
        {
            "name": "Metal Enclosures",
            "slug": "metal-enclosures",
            "description": "Durable steel enclosures designed for industrial environments where strength and protection are essential.",
            "image": "/images/services/metal-enclosures.jpg",
            "features": [
                "Robust steel construction",
                "Various IP protection ratings available",
                "Optional powder coating for enhanced durability",
                "Multiple mounting options",
            ],
            "benefits": [
                "Superior protection against physical impact",
                "Excellent EMI/RFI shielding capabilities",
                "Long service life in industrial environments",
            ],
        },
        {
            "name": "Stainless Steel Enclosures",
            "slug": "stainless-steel-enclosures",
            "description": "Corrosion-resistant enclosures ideal for food processing, pharmaceutical, and outdoor applications.",
            "image": "/images/services/stainless-steel-enclosures.jpg",
            "features": [
                "304 or 316L stainless steel construction",
                "Seamless welded design options",
                "Brushed or polished finish options",
            ],
            "benefits": [
                "Exceptional corrosion resistance",
                "Suitable for washdown environments",
                "Extended service life in harsh environments",
            ],
        },
        {
            "name": "Plastic Enclosures",
            "slug": "plastic-enclosures",
            "description": "Lightweight, non-conductive enclosures perfect for electrical applications and corrosive environments.",
            "image": "/images/services/plastic-enclosures.jpg",
            "features": [
                "UV-resistant materials for outdoor use",
                "Non-conductive for electrical safety",
                "Transparent lid options available",
            ],
            "benefits": [
                "Excellent electrical insulation properties",
                "No risk of corrosion in harsh environments",
                "Lower installation costs due to light weight",
            ],
        },
    ],
    "custom-solutions": [
        {
            "name": "Custom Design Services",
            "slug": "custom-design-services",
            "description": "Expert engineering and design services to create the perfect enclosure for your unique requirements.",
            "image": "/images/services/custom-design.jpg",
            "features": [
                "Comprehensive consultation and requirements analysis",
                "Advanced 3D CAD design and modeling",
                "Prototype development and testing",
            ],
            "benefits": [
                "Enclosures precisely tailored to your application",
                "Validation of performance before manufacturing",
            ],
        },
        {
            "name": "Specialized Materials",
            "slug": "specialized-materials",
            "description": "Enclosures manufactured from specialized materials for extreme environments and unique applications.",
            "image": "/images/services/specialized-materials.jpg",
            "features": [
                "High-temperature resistant alloys",
                "Composite materials for weight reduction",
                "Specialty plastics for chemical resistance",
            ],
            "benefits": [
                "Performance in extreme environmental conditions",
                "Weight reduction without compromising strength",
            ],
        },
        {
            "name": "OEM Integration Solutions",
            "slug": "oem-integration-solutions",
            "description": "Custom enclosures designed for seamless integration with your products and manufacturing processes.",
            "image": "/images/services/oem-integration.jpg",
            "features": [
                "Design for Manufacturing (DFM) approach",
                "Integration of your branding elements",
                "Consistent quality across large production runs",
            ],
            "benefits": [
                "Reduced assembly time and complexity",
                "Reliable supply chain for continuous production",
            ],
        },
    ],
    "modification-services": [
        {
            "name": "CNC Machining",
            "slug": "cnc-machining",
            "description": "Precision CNC machining services for accurate cutouts, holes, and complex modifications.",
            "image": "/images/services/cnc-machining.jpg",
            "features": [
                "Precision cutouts for displays, connectors, and controls",
                "Thread tapping for secure component attachment",
                "Custom engraving for identification and branding",
            ],
            "benefits": [
                "Perfect fit for your components and equipment",
                "Consistent results across multiple enclosures",
            ],
        },
        {
            "name": "Surface Finishing",
            "slug": "surface-finishing",
            "description": "Professional painting, powder coating, and specialized surface treatments for enclosures.",
            "image": "/images/services/surface-finishing.jpg",
            "features": [
                "Custom color matching to your specifications",
                "Chemical-resistant coatings for harsh environments",
                "UV-resistant treatments for outdoor applications",
            ],
            "benefits": [
                "Enhanced aesthetic appearance and brand consistency",
                "Improved corrosion and chemical resistance",
            ],
        },
        {
            "name": "Thermal Management",
            "slug": "thermal-management",
            "description": "Installation of cooling systems, vents, and thermal solutions to maintain optimal internal temperatures.",
            "image": "/images/services/thermal-management.jpg",
            "features": [
                "Filtered ventilation systems with appropriate IP protection",
                "Fan installation with temperature controllers",
                "Heat exchanger integration for sealed enclosures",
            ],
            "benefits": [
                "Prevention of equipment overheating and failure",
                "Extended component life through proper temperature control",
            ],
        },
    ],
}

PRODUCTS = [
    {
        "name": "Metal Enclosures",
        "slug": "metal-enclosures",
        "description": "Durable steel enclosures for industrial applications",
        "image": "/images/products/metal-enclosures.jpg",
        "category": "Enclosures",
        "featured": True,
    },
    {
        "name": "Stainless Steel Cabinets",
        "slug": "stainless-steel-cabinets",
        "description": "Corrosion-resistant cabinets for harsh environments",
        "image": "/images/products/stainless-steel-cabinets.jpg",
        "category": "Cabinets",
        "featured": True,
    },
    {
        "name": "Plastic Enclosures",
        "slug": "plastic-enclosures",
        "description": "Lightweight and versatile plastic enclosure options",
        "image": "/images/products/plastic-enclosures.jpg",
        "category": "Enclosures",
        "featured": True,
    },
    {
        "name": "Custom Enclosures",
        "slug": "custom-enclosures",
        "description": "Bespoke solutions tailored to your specifications",
        "image": "/images/products/custom-enclosures.jpg",
        "category": "Custom",
        "featured": True,
    },
]

BLOG_POSTS = [
    {
        "title": "Choosing the Right Enclosure for Your Industrial Application",
        "slug": "choosing-right-enclosure",
        "content": "<p>Learn about the key factors to consider when selecting an industrial enclosure for your specific needs and environment.</p><h2>Environment Considerations</h2><p>The environment where your enclosure will be installed plays a crucial role in determining the appropriate material and IP rating.</p><h2>Size and Accessibility</h2><p>Proper sizing ensures that all components fit comfortably with adequate space for heat dissipation and maintenance.</p>",
        "excerpt": "Learn about the key factors to consider when selecting an industrial enclosure for your specific needs and environment.",
        "status": "published",
        "publish_date": datetime(2023, 1, 15, tzinfo=timezone.utc),
        "images": ["/images/blog/enclosure-selection.jpg"],
        "categories": ["Industrial Solutions", "Best Practices"],
        "tags": ["enclosures", "industrial", "selection guide"],
        "meta_title": "How to Choose the Right Industrial Enclosure | Total Enclosures",
        "meta_description": "Learn the essential factors to consider when selecting industrial enclosures for your specific application and environment.",
    },
    {
        "title": "The Benefits of Custom Enclosure Solutions",
        "slug": "benefits-custom-enclosures",
        "content": "<p>Discover how custom enclosure solutions can improve efficiency, reduce costs, and address your unique challenges.</p><h2>Perfect Fit for Your Equipment</h2><p>Custom enclosures are designed specifically for your equipment.</p><h2>Cost Efficiency</h2><p>While custom solutions may have higher upfront costs, they often provide long-term savings.</p>",
        "excerpt": "Discover how custom enclosure solutions can improve efficiency, reduce costs, and address your unique challenges.",
        "status": "published",
        "publish_date": datetime(2023, 2, 20, tzinfo=timezone.utc),
        "images": ["/images/blog/custom-enclosures.jpg"],
        "categories": ["Custom Solutions", "Industry Insights"],
        "tags": ["custom enclosures", "efficiency", "cost reduction"],
        "meta_title": "Benefits of Custom Industrial Enclosures | Total Enclosures",
        "meta_description": "Explore how custom enclosure solutions improve efficiency, reduce costs, and address unique industrial challenges.",
    },
    {
        "title": "Industry Trends: The Future of Industrial Enclosures",
        "slug": "industry-trends-future",
        "content": "<p>Stay ahead of the curve with our insights into the emerging trends and innovations in industrial enclosure technology.</p><h2>Smart Enclosures</h2><p>The integration of IoT capabilities is transforming traditional enclosures into intelligent systems.</p><h2>Modular and Scalable Designs</h2><p>Flexibility is becoming increasingly important in industrial applications.</p>",
        "excerpt": "Stay ahead of the curve with our insights into the emerging trends and innovations in industrial enclosure technology.",
        "status": "published",
        "publish_date": datetime(2023, 3, 8, tzinfo=timezone.utc),
        "images": ["/images/blog/future-trends.jpg"],
        "categories": ["Industry Trends", "Innovation"],
        "tags": ["trends", "innovation", "future technology", "smart enclosures"],
        "meta_title": "Future Trends in Industrial Enclosure Technology | Total Enclosures",
        "meta_description": "Discover emerging trends and innovations in industrial enclosure technology.",
    },
]


def seed_demo_data(store: ContentStore) -> None:
    """Load the demo dataset through the store's public create operations."""
    store.create_user(UserCreate(**ADMIN_USER))

    # Main services first so they take ids 1-3.
    parents = [store.create_service(ServiceCreate(**p)) for p in MAIN_SERVICES]
    for parent in parents:
        for order, child in enumerate(SUB_SERVICES[parent.slug], start=1):
            store.create_service(
                ServiceCreate(**child, parent_id=parent.id, order=order)
            )

    for payload in PRODUCTS:
        store.create_product(ProductCreate(**payload))

    for payload in BLOG_POSTS:
        store.create_blog_post(BlogPostCreate(**payload))

    logger.info("Seeded demo content into %s", store.__class__.__name__)


def seed_if_empty(store: ContentStore) -> bool:
    """Seed a persistent store only the first time it is used."""
    if store.get_services():
        return False
    seed_demo_data(store)
    return True
