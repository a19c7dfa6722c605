import logging

from sqlalchemy import or_

from kint import db
from kint.cache import cached, revalidate
from kint.content import assign, commit, get_or_404, load
from kint.errors import ConflictError
from kint.models import BlogPost, utcnow
from kint.schemas import BlogPostInput, BlogPostSchema
from kint.slugs import slug_exists, slugify, unique_slug

logger = logging.getLogger(__name__)

TAGS = ('blog-posts',)
PATHS = ('/admin/blog', '/blog', '/')

SUMMARY_FIELDS = (
    'id', 'title', 'title_ar', 'slug', 'excerpt', 'excerpt_ar', 'author', 'image',
    'tags', 'is_published', 'published_at', 'created_at',
)


def _revalidate(*slugs):
    revalidate(tags=TAGS, paths=PATHS + tuple('/blog/%s' % s for s in slugs))


@cached('blog-posts:list', tags=TAGS, ttl=10)
def get_blog_posts():
    rows = db.session.query(BlogPost).order_by(BlogPost.created_at.desc(), BlogPost.id.desc()).all()
    return BlogPostSchema(many=True, only=SUMMARY_FIELDS).dump(rows)


@cached('blog-posts:published', tags=TAGS, ttl=10)
def get_published_posts():
    rows = (
        db.session.query(BlogPost)
        .filter(BlogPost.is_published.is_(True))
        .order_by(BlogPost.published_at.desc(), BlogPost.id.desc())
        .all()
    )
    return BlogPostSchema(many=True, only=SUMMARY_FIELDS).dump(rows)


@cached('blog-posts:by-slug', tags=TAGS, ttl=10)
def get_blog_post_by_slug(slug):
    post = db.session.query(BlogPost).filter(BlogPost.slug == slug).first()
    return BlogPostSchema().dump(post) if post else None


@cached('blog-posts:by-id', tags=TAGS, ttl=10)
def get_blog_post_by_id(post_id):
    post = db.session.get(BlogPost, post_id)
    return BlogPostSchema().dump(post) if post else None


def search_posts(term, limit=20):
    pattern = '%%%s%%' % term
    rows = (
        db.session.query(BlogPost)
        .filter(
            BlogPost.is_published.is_(True),
            or_(BlogPost.title.ilike(pattern), BlogPost.title_ar.ilike(pattern),
                BlogPost.excerpt.ilike(pattern)),
        )
        .order_by(BlogPost.published_at.desc())
        .limit(limit)
        .all()
    )
    return BlogPostSchema(many=True, only=SUMMARY_FIELDS).dump(rows)


def create_blog_post(payload):
    data = load(BlogPostInput, payload)
    if data.get('slug'):
        if slug_exists(BlogPost, data['slug']):
            raise ConflictError('Slug is already in use.', field='slug')
    else:
        data['slug'] = unique_slug(BlogPost, slugify(data['title']))

    post = assign(BlogPost(), data)
    post.published_at = utcnow() if post.is_published else None
    db.session.add(post)
    commit()
    logger.info("Created blog post %s (%s)", post.id, post.slug)
    _revalidate(post.slug)
    return post


def update_blog_post(post_id, payload):
    post = get_or_404(BlogPost, post_id, 'Blog post')
    data = load(BlogPostInput, payload, partial=True)
    if data.get('slug') and slug_exists(BlogPost, data['slug'], exclude_id=post.id):
        raise ConflictError('Slug is already in use.', field='slug')

    old_slug = post.slug
    assign(post, data)
    # First publication stamps the date; later edits keep it.
    if post.is_published and post.published_at is None:
        post.published_at = utcnow()
    commit()
    _revalidate(old_slug, post.slug)
    return post


def delete_blog_post(post_id):
    post = get_or_404(BlogPost, post_id, 'Blog post')
    slug = post.slug
    db.session.delete(post)
    commit()
    logger.info("Deleted blog post %s (%s)", post_id, slug)
    _revalidate(slug)
