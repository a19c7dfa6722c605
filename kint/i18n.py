"""Server-side internationalisation helpers.

Every content record carries a default-language field and an ``_ar``
variant. :func:`localized` picks the right one for the active language and
falls back to the default text when the Arabic column is empty. Shared UI
strings live in :data:`BASE_TRANSLATIONS`.
"""

from __future__ import annotations

from typing import Any, Dict

from flask import g, has_request_context, request, session

DEFAULT_LANGUAGE = "en"

AVAILABLE_LANGUAGES: Dict[str, str] = {
    "en": "English",
    "ar": "العربية",
}

RTL_LANGUAGES = frozenset({"ar"})

BASE_TRANSLATIONS: Dict[str, Dict[str, str]] = {
    "en": {
        "meta.site_name": "KINT Kafri International",
        "meta.tagline": "Fertilisers and feed additives for modern agriculture",
        "nav.home": "Home",
        "nav.products": "Products",
        "nav.blog": "Blog",
        "nav.about": "About Us",
        "nav.about.certificates": "Certificates",
        "nav.about.awards": "Awards",
        "nav.about.company_data": "Company Data",
        "nav.about.career": "Career",
        "nav.catalogs": "Catalogs",
        "nav.contact": "Contact",
        "nav.contact.headquarter": "Headquarter",
        "nav.search": "Search",
        "nav.language": "Language",
        "home.featured": "Featured Products",
        "home.categories": "Our Product Lines",
        "home.latest_posts": "Latest Articles",
        "products.title": "Products",
        "products.empty": "No products in this category yet.",
        "products.subcategories": "Subcategories",
        "products.downloads": "Downloads",
        "products.composition": "Composition",
        "products.usage": "Usage",
        "blog.title": "Blog",
        "blog.by": "By",
        "blog.draft": "Draft",
        "blog.back": "Back to blog",
        "blog.empty": "No articles published yet.",
        "search.title": "Search",
        "search.placeholder": "Search products and articles",
        "search.empty": "Nothing matched your search.",
        "contact.title": "Contact Us",
        "contact.name": "Name",
        "contact.email": "Email",
        "contact.phone": "Phone",
        "contact.department": "Department",
        "contact.subject": "Subject",
        "contact.message": "Message",
        "contact.submit": "Send message",
        "contact.success": "Your message has been sent successfully!",
        "contact.error": "Please fill in your name, email and message.",
        "career.title": "Career",
        "career.empty": "There are no open positions at the moment.",
        "career.apply": "Apply",
        "career.success": "Application submitted successfully!",
        "certificates.title": "Certificates",
        "awards.title": "Awards",
        "catalogs.title": "Catalogs",
        "catalogs.download": "Download",
        "company.title": "Company Data",
        "company.ncr": "NCR number",
        "company.vat": "VAT number",
        "company.capital": "Share capital",
        "company.court": "Registry court",
        "headquarter.title": "Headquarter",
        "errors.not_found": "The page you are looking for does not exist.",
        "errors.server": "Something went wrong on our side. Please try again later.",
        "footer.copyright": "Copyright © {year}, KINT Kafri International.",
        "auth.login.title": "Administrator Login",
        "auth.login.email": "Email",
        "auth.login.password": "Password",
        "auth.login.submit": "Sign in",
        "auth.login.error": "Incorrect email or password.",
        "auth.login.success": "Welcome back!",
        "auth.logout.success": "You have been signed out.",
        "admin.nav.dashboard": "Dashboard",
        "admin.nav.categories": "Categories",
        "admin.nav.products": "Products",
        "admin.nav.blog": "Blog",
        "admin.nav.pages": "Pages",
        "admin.nav.career": "Job Offers",
        "admin.nav.applications": "Applications",
        "admin.nav.inquiries": "Inquiries",
        "admin.nav.catalogs": "Catalogs",
        "admin.nav.documents": "Documents",
        "admin.nav.certificates": "Certificates",
        "admin.nav.awards": "Awards",
        "admin.nav.company_data": "Company Data",
        "admin.nav.headquarter": "Headquarter",
        "admin.nav.logout": "Sign out",
        "admin.nav.greeting": "Hello, {name}",
    },
    "ar": {
        "meta.site_name": "كينت كفري الدولية",
        "meta.tagline": "أسمدة وإضافات أعلاف للزراعة الحديثة",
        "nav.home": "الرئيسية",
        "nav.products": "المنتجات",
        "nav.blog": "المدونة",
        "nav.about": "من نحن",
        "nav.about.certificates": "الشهادات",
        "nav.about.awards": "الجوائز",
        "nav.about.company_data": "بيانات الشركة",
        "nav.about.career": "الوظائف",
        "nav.catalogs": "الكتالوجات",
        "nav.contact": "تواصل معنا",
        "nav.contact.headquarter": "المقر الرئيسي",
        "nav.search": "بحث",
        "nav.language": "اللغة",
        "home.featured": "منتجات مميزة",
        "home.categories": "خطوط منتجاتنا",
        "home.latest_posts": "أحدث المقالات",
        "products.title": "المنتجات",
        "products.empty": "لا توجد منتجات في هذا القسم بعد.",
        "products.subcategories": "الأقسام الفرعية",
        "products.downloads": "التحميلات",
        "products.composition": "التركيب",
        "products.usage": "الاستخدام",
        "blog.title": "المدونة",
        "blog.by": "بقلم",
        "blog.draft": "مسودة",
        "blog.back": "العودة إلى المدونة",
        "blog.empty": "لا توجد مقالات منشورة بعد.",
        "search.title": "بحث",
        "search.placeholder": "ابحث في المنتجات والمقالات",
        "search.empty": "لا توجد نتائج مطابقة.",
        "contact.title": "تواصل معنا",
        "contact.name": "الاسم",
        "contact.email": "البريد الإلكتروني",
        "contact.phone": "الهاتف",
        "contact.department": "القسم",
        "contact.subject": "الموضوع",
        "contact.message": "الرسالة",
        "contact.submit": "إرسال",
        "contact.success": "تم إرسال رسالتك بنجاح!",
        "contact.error": "يرجى إدخال الاسم والبريد الإلكتروني والرسالة.",
        "career.title": "الوظائف",
        "career.empty": "لا توجد وظائف شاغرة حالياً.",
        "career.apply": "قدّم الآن",
        "career.success": "تم إرسال طلبك بنجاح!",
        "certificates.title": "الشهادات",
        "awards.title": "الجوائز",
        "catalogs.title": "الكتالوجات",
        "catalogs.download": "تحميل",
        "company.title": "بيانات الشركة",
        "company.ncr": "رقم السجل التجاري",
        "company.vat": "الرقم الضريبي",
        "company.capital": "رأس المال",
        "company.court": "محكمة التسجيل",
        "headquarter.title": "المقر الرئيسي",
        "errors.not_found": "الصفحة المطلوبة غير موجودة.",
        "errors.server": "حدث خطأ ما. يرجى المحاولة لاحقاً.",
        "footer.copyright": "جميع الحقوق محفوظة © {year}، كينت كفري الدولية.",
        "auth.login.title": "تسجيل دخول المشرف",
        "auth.login.email": "البريد الإلكتروني",
        "auth.login.password": "كلمة المرور",
        "auth.login.submit": "تسجيل الدخول",
        "auth.login.error": "بيانات الدخول غير صحيحة.",
        "auth.login.success": "مرحباً بعودتك!",
        "auth.logout.success": "تم تسجيل الخروج بنجاح.",
        "admin.nav.dashboard": "لوحة التحكم",
        "admin.nav.categories": "الأقسام",
        "admin.nav.products": "المنتجات",
        "admin.nav.blog": "المدونة",
        "admin.nav.pages": "الصفحات",
        "admin.nav.career": "الوظائف",
        "admin.nav.applications": "طلبات التوظيف",
        "admin.nav.inquiries": "الرسائل",
        "admin.nav.catalogs": "الكتالوجات",
        "admin.nav.documents": "المستندات",
        "admin.nav.certificates": "الشهادات",
        "admin.nav.awards": "الجوائز",
        "admin.nav.company_data": "بيانات الشركة",
        "admin.nav.headquarter": "المقر الرئيسي",
        "admin.nav.logout": "تسجيل الخروج",
        "admin.nav.greeting": "مرحباً، {name}",
    },
}


def normalise_lang(candidate) -> str:
    if not candidate:
        return DEFAULT_LANGUAGE
    normalised = str(candidate).strip().lower()
    if normalised in AVAILABLE_LANGUAGES:
        return normalised
    return DEFAULT_LANGUAGE


def resolve_request_language() -> str:
    """Pick the language from ``?lang=``, the URL prefix, then the session."""
    candidate = request.args.get("lang")
    if candidate in AVAILABLE_LANGUAGES:
        return candidate
    prefix = request.path.strip("/").split("/", 1)[0]
    if prefix in AVAILABLE_LANGUAGES:
        return prefix
    stored = session.get("lang")
    if stored in AVAILABLE_LANGUAGES:
        return stored
    return DEFAULT_LANGUAGE


def current_language() -> str:
    if not has_request_context():
        return DEFAULT_LANGUAGE
    return getattr(g, "current_lang", DEFAULT_LANGUAGE)


def text_direction(lang: str) -> str:
    return "rtl" if lang in RTL_LANGUAGES else "ltr"


def get_translation(key: str, lang: str, default: str | None = None) -> str:
    """Return the translation for *key* in *lang* or fall back to English."""
    if lang not in AVAILABLE_LANGUAGES:
        lang = DEFAULT_LANGUAGE
    lang_bucket = BASE_TRANSLATIONS.get(lang, {})
    if key in lang_bucket:
        return lang_bucket[key]
    fallback = BASE_TRANSLATIONS.get(DEFAULT_LANGUAGE, {}).get(key)
    if fallback is not None:
        return fallback
    return default if default is not None else key


def _read(record: Any, name: str):
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def localized(record: Any, field: str, lang: str | None = None):
    """Return ``record.<field>_<lang>`` when present, else ``record.<field>``."""
    lang = lang or current_language()
    if lang != DEFAULT_LANGUAGE:
        value = _read(record, "%s_%s" % (field, lang))
        if value:
            return value
    return _read(record, field)
