from datetime import datetime, timezone

from flask_login import UserMixin

from kint import bcrypt, db


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TimestampMixin:
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)


class Admin(db.Model, UserMixin):
    __tablename__ = "admins"
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    name = db.Column(db.String(120))
    role = db.Column(db.String(20), default='admin', nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    def set_password(self, raw_password):
        self.password_hash = bcrypt.generate_password_hash(raw_password).decode('utf-8')

    def check_password(self, raw_password):
        return bcrypt.check_password_hash(self.password_hash, raw_password)


class Category(TimestampMixin, db.Model):
    __tablename__ = "categories"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    name_ar = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(200), unique=True, nullable=False)
    description = db.Column(db.Text)
    description_ar = db.Column(db.Text)
    image = db.Column(db.String(500))
    parent_id = db.Column(db.Integer, db.ForeignKey('categories.id', ondelete='RESTRICT'))
    order = db.Column(db.Integer, default=0, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    parent = db.relationship('Category', remote_side=[id], back_populates='children')
    children = db.relationship('Category', back_populates='parent', order_by='Category.order')
    products = db.relationship('Product', back_populates='category', order_by='Product.order')


class Product(TimestampMixin, db.Model):
    __tablename__ = "products"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    name_ar = db.Column(db.String(200))
    slug = db.Column(db.String(200), unique=True, nullable=False)
    sku = db.Column(db.String(100))
    description = db.Column(db.Text)
    description_ar = db.Column(db.Text)
    short_desc = db.Column(db.String(500))
    short_desc_ar = db.Column(db.String(500))
    category_id = db.Column(db.Integer, db.ForeignKey('categories.id', ondelete='RESTRICT'), nullable=False)
    is_featured = db.Column(db.Boolean, default=False, nullable=False)
    is_organic = db.Column(db.Boolean, default=False, nullable=False)
    order = db.Column(db.Integer, default=0, nullable=False)
    color_theme = db.Column(db.String(30), default='blue', nullable=False)
    image = db.Column(db.String(500))
    benefits = db.Column(db.Text)
    benefits_ar = db.Column(db.Text)
    usage = db.Column(db.Text)
    usage_ar = db.Column(db.Text)
    usage_table = db.Column(db.JSON)
    usage_table_ar = db.Column(db.JSON)
    comp_table = db.Column(db.JSON)
    comp_table_ar = db.Column(db.JSON)
    tabs = db.Column(db.JSON)
    tabs_ar = db.Column(db.JSON)
    meta_title = db.Column(db.String(200))
    meta_title_ar = db.Column(db.String(200))
    meta_desc = db.Column(db.String(500))
    meta_desc_ar = db.Column(db.String(500))

    category = db.relationship('Category', back_populates='products')
    sections = db.relationship(
        'ProductSection', back_populates='product',
        order_by='ProductSection.order', cascade='all, delete-orphan',
    )
    downloads = db.relationship(
        'ProductDownload', back_populates='product', cascade='all, delete-orphan',
    )


class ProductSection(TimestampMixin, db.Model):
    __tablename__ = "product_sections"
    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(db.Integer, db.ForeignKey('products.id', ondelete='CASCADE'), nullable=False)
    title = db.Column(db.String(200), nullable=False)
    title_ar = db.Column(db.String(200))
    content = db.Column(db.Text)
    content_ar = db.Column(db.Text)
    order = db.Column(db.Integer, default=0, nullable=False)
    color_theme = db.Column(db.String(30), default='blue', nullable=False)

    product = db.relationship('Product', back_populates='sections')


class ProductDownload(db.Model):
    __tablename__ = "product_downloads"
    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(db.Integer, db.ForeignKey('products.id', ondelete='CASCADE'), nullable=False)
    title = db.Column(db.String(200), nullable=False)
    type = db.Column(db.String(50))
    file_url = db.Column(db.String(500), nullable=False)

    product = db.relationship('Product', back_populates='downloads')


class BlogPost(TimestampMixin, db.Model):
    __tablename__ = "blog_posts"
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(250), nullable=False)
    title_ar = db.Column(db.String(250))
    slug = db.Column(db.String(250), unique=True, nullable=False)
    excerpt = db.Column(db.Text)
    excerpt_ar = db.Column(db.Text)
    content = db.Column(db.Text)
    content_ar = db.Column(db.Text)
    author = db.Column(db.String(120))
    image = db.Column(db.String(500))
    tags = db.Column(db.JSON, default=list)
    meta_title = db.Column(db.String(200))
    meta_desc = db.Column(db.String(500))
    is_published = db.Column(db.Boolean, default=False, nullable=False)
    published_at = db.Column(db.DateTime)


class Page(TimestampMixin, db.Model):
    __tablename__ = "pages"
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(250), nullable=False)
    title_ar = db.Column(db.String(250))
    slug = db.Column(db.String(250), unique=True, nullable=False)
    content = db.Column(db.Text)
    content_ar = db.Column(db.Text)
    template = db.Column(db.String(50), default='default')
    is_active = db.Column(db.Boolean, default=True, nullable=False)


class JobOffer(TimestampMixin, db.Model):
    __tablename__ = "job_offers"
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(250), nullable=False)
    title_ar = db.Column(db.String(250))
    location = db.Column(db.String(200))
    location_ar = db.Column(db.String(200))
    work_type = db.Column(db.String(100))
    work_type_ar = db.Column(db.String(100))
    contract_type = db.Column(db.String(100))
    contract_type_ar = db.Column(db.String(100))
    employment_type = db.Column(db.String(100))
    employment_type_ar = db.Column(db.String(100))
    company_intro = db.Column(db.Text)
    company_intro_ar = db.Column(db.Text)
    responsibilities = db.Column(db.Text)
    responsibilities_ar = db.Column(db.Text)
    benefits = db.Column(db.Text)
    benefits_ar = db.Column(db.Text)
    qualifications = db.Column(db.Text)
    qualifications_ar = db.Column(db.Text)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    published_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    expires_at = db.Column(db.DateTime)

    applications = db.relationship(
        'JobApplication', back_populates='job_offer', cascade='all, delete-orphan',
    )


class JobApplication(db.Model):
    __tablename__ = "job_applications"
    id = db.Column(db.Integer, primary_key=True)
    job_offer_id = db.Column(db.Integer, db.ForeignKey('job_offers.id', ondelete='CASCADE'), nullable=False)
    first_name = db.Column(db.String(120), nullable=False)
    last_name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(200), nullable=False)
    phone = db.Column(db.String(50))
    address = db.Column(db.String(300))
    linked_in = db.Column(db.String(300))
    cv_url = db.Column(db.String(500))
    cover_letter = db.Column(db.Text)
    status = db.Column(db.String(20), default='pending', nullable=False)
    notes = db.Column(db.Text)
    submitted_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    job_offer = db.relationship('JobOffer', back_populates='applications')


class ContactSubmission(db.Model):
    __tablename__ = "contact_submissions"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    email = db.Column(db.String(200), nullable=False)
    phone = db.Column(db.String(50))
    department = db.Column(db.String(100))
    subject = db.Column(db.String(250))
    message = db.Column(db.Text, nullable=False)
    is_read = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)


class GalleryItemMixin(TimestampMixin):
    """Ordered image gallery entries (certificates, awards)."""

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(250), nullable=False)
    title_ar = db.Column(db.String(250))
    description = db.Column(db.Text)
    description_ar = db.Column(db.Text)
    image_url = db.Column(db.String(500), nullable=False)
    order = db.Column(db.Integer, default=0, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)


class Certificate(GalleryItemMixin, db.Model):
    __tablename__ = "certificates"


class Award(GalleryItemMixin, db.Model):
    __tablename__ = "awards"


class Catalog(TimestampMixin, db.Model):
    __tablename__ = "catalogs"
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(250), nullable=False)
    title_ar = db.Column(db.String(250))
    description = db.Column(db.Text)
    description_ar = db.Column(db.Text)
    file_url = db.Column(db.String(500), nullable=False)
    category = db.Column(db.String(100))
    locale = db.Column(db.String(5))
    order = db.Column(db.Integer, default=0, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)


class Document(TimestampMixin, db.Model):
    __tablename__ = "documents"
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(250), nullable=False)
    title_ar = db.Column(db.String(250))
    slug = db.Column(db.String(250), unique=True, nullable=False)
    description = db.Column(db.Text)
    description_ar = db.Column(db.Text)
    file_path = db.Column(db.String(500), nullable=False)
    category = db.Column(db.String(100), nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    downloads = db.Column(db.Integer, default=0, nullable=False)


class CompanyData(TimestampMixin, db.Model):
    __tablename__ = "company_data"
    id = db.Column(db.Integer, primary_key=True)
    company_name = db.Column(db.String(250), nullable=False)
    company_name_ar = db.Column(db.String(250))
    address = db.Column(db.Text)
    address_ar = db.Column(db.Text)
    court_info = db.Column(db.Text)
    court_info_ar = db.Column(db.Text)
    ncr_number = db.Column(db.String(50))
    vat_number = db.Column(db.String(50))
    capital = db.Column(db.String(100))
    capital_ar = db.Column(db.String(100))


class Headquarter(TimestampMixin, db.Model):
    __tablename__ = "headquarters"
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(250), nullable=False, default='Company Headquarter')
    title_ar = db.Column(db.String(250))
    content = db.Column(db.Text)
    content_ar = db.Column(db.Text)
    address = db.Column(db.Text)
    address_ar = db.Column(db.Text)
    latitude = db.Column(db.Float)
    longitude = db.Column(db.Float)
