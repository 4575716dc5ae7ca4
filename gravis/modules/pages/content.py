"""Static storefront copy: navigation, contact details, offices, footer links."""

NAV_LINKS = [
    {"label": "Home", "href": "/"},
    {"label": "Products", "href": "/products"},
    {"label": "About", "href": "/about"},
    {"label": "Contact", "href": "/contact"},
]

SOCIAL_LINKS = [
    {"label": "Facebook", "href": "https://facebook.com"},
    {"label": "X (Twitter)", "href": "https://x.com"},
    {"label": "Instagram", "href": "https://instagram.com"},
    {"label": "LinkedIn", "href": "https://linkedin.com"},
]

CONTACT = {
    "phone": "+91 98765 43210",
    "email": "hello@gravis.com",
    "emails": ["hello@gravis.com", "sales@gravis.com", "support@gravis.com"],
    "phones": ["+91 98765 43210", "+91 98765 43211"],
}

OFFICES = [
    {
        "name": "Head Office",
        "address": "123 Industrial Area, Phase 2, Sector 18, Gurugram, Haryana 122015",
        "phone": "+91 98765 43210",
        "email": "hello@gravis.com",
        "hours": "Mon – Sat: 9:00 AM – 6:00 PM",
        "map_query": "Sector 18, Gurugram, Haryana 122015",
    },
    {
        "name": "Branch – Mumbai",
        "address": "45 Trade Center, Andheri East, Mumbai, Maharashtra 400069",
        "phone": "+91 98765 43211",
        "email": "mumbai@gravis.com",
        "hours": "Mon – Fri: 10:00 AM – 7:00 PM",
        "map_query": "Andheri East, Mumbai, Maharashtra 400069",
    },
]

FOOTER_GROUPS = [
    {
        "title": "Shop",
        "links": [
            {"label": "All products", "href": "/products"},
            {"label": "Cart", "href": "/cart"},
        ],
    },
    {
        "title": "Company",
        "links": [
            {"label": "About us", "href": "/about"},
            {"label": "Contact", "href": "/contact"},
        ],
    },
    {
        "title": "Account",
        "links": [
            {"label": "Log in", "href": "/login"},
            {"label": "Create account", "href": "/register"},
        ],
    },
]

HERO = {
    "title": "Reliable power for every need",
    "subtitle": "Diesel and petrol generators, inverters and power equipment, backed by nationwide service.",
    "cta_label": "Shop products",
    "cta_href": "/products",
}

PERKS = [
    {"title": "Free Shipping", "sub": "On all orders over ₹500. Learn more."},
    {"title": "Easy Returns", "sub": "7-day hassle-free returns."},
    {"title": "Warranty Support", "sub": "Genuine parts and certified service."},
]
