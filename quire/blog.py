#!/usr/bin/env python3
"""
A small single-admin markdown blog.
"""

import os
import re
import secrets
import sqlite3
from collections import defaultdict, deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import wraps
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from time import time
from typing import Any, DefaultDict, Mapping
from urllib.parse import urlparse

import click
import markdown
from flask import (
    Flask,
    Response,
    abort,
    g,
    redirect,
    render_template_string,
    request,
    session,
    url_for,
)
from itsdangerous import BadSignature, SignatureExpired, TimestampSigner
from werkzeug.exceptions import NotFound, Unauthorized
from werkzeug.middleware.proxy_fix import ProxyFix
from werkzeug.security import check_password_hash as verify_token
from werkzeug.security import generate_password_hash as hash_token

################################################################################
# Imports & constants
################################################################################

ROOT = Path(__file__).parent
DB_FILE = Path(os.environ.get("QUIRE_DATABASE", str(ROOT / "blog.sqlite3")))

SECRET_FILE = ROOT / ".secret_key"
SECRET_KEY = os.environ.get("SECRET_KEY") or (
    SECRET_FILE.read_text().strip() if SECRET_FILE.exists() else secrets.token_hex(32)
)
if "SECRET_KEY" not in os.environ:
    SECRET_FILE.write_text(SECRET_KEY)
TOKEN_LEN = 48
TOKEN_MAX_AGE = 60
signer = TimestampSigner(SECRET_KEY, salt="login-token")

ADMIN_PATH = "/posts/admin"
NEW_SLUG = "new"
RESERVED_SLUGS = {NEW_SLUG, "admin"}
SLUG_RE = re.compile(r"^[A-Za-z0-9_-]+$")
INTENTS = ("create", "update", "delete")
SAFE_METHODS = {"GET", "HEAD", "OPTIONS", "TRACE"}

try:
    __version__ = version("quire")
except PackageNotFoundError:
    __version__ = "0.1.0-dev"


################################################################################
# App
################################################################################
app = Flask(__name__)
app.url_map.strict_slashes = False
app.config.update(
    SECRET_KEY=SECRET_KEY,
    DATABASE=str(DB_FILE),
    ADMIN_EMAIL=os.environ.get("ADMIN_EMAIL", ""),
    SITE_NAME=os.environ.get("SITE_NAME", "quire"),
)
app.config.update(
    SESSION_COOKIE_SAMESITE="Lax",  # blocks most CSRF on simple links
    SESSION_COOKIE_HTTPONLY=True,  # mitigate XSS → cookie theft
    SESSION_COOKIE_SECURE=os.environ.get("SESSION_COOKIE_SECURE", "1") != "0",
)
app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)


def admin_email() -> str:
    email = app.config.get("ADMIN_EMAIL")
    if not email:
        raise RuntimeError("ADMIN_EMAIL is not set")
    return email.strip().lower()


def site_name() -> str:
    return app.config.get("SITE_NAME") or "quire"


# -------------------------------------------------------------------------
# Time helpers
# -------------------------------------------------------------------------
def utc_now() -> datetime:
    """Return an *aware* datetime in UTC."""
    return datetime.now(timezone.utc)


###############################################################################
# Markdown
###############################################################################
MD_EXTENSION_CONFIGS = {
    "pymdownx.highlight": {
        "guess_lang": False,
        "noclasses": True,
        "pygments_style": "nord",
    },
}
MD_EXTENSIONS = [
    "pymdownx.extra",
    "pymdownx.magiclink",
    "pymdownx.tilde",
    "pymdownx.superfences",
    "pymdownx.highlight",
    "pymdownx.betterem",
    "pymdownx.saneheaders",
]


def _markdown_renderer() -> markdown.Markdown:
    return markdown.Markdown(
        extensions=MD_EXTENSIONS,
        extension_configs=MD_EXTENSION_CONFIGS,
    )


def render_markdown(text: str | None) -> str:
    """
    Convert Markdown source to HTML.

    The author is the (single, trusted) admin, so the output is embedded
    into the page verbatim without a sanitising pass.
    """
    return _markdown_renderer().convert(text or "")


###############################################################################
# Database helpers
###############################################################################
def get_db():
    if "db" not in g:
        g.db = sqlite3.connect(app.config["DATABASE"])
        g.db.row_factory = sqlite3.Row
    return g.db


@app.teardown_appcontext
def close_db(error=None):
    db = g.pop("db", None)
    if db is not None:
        db.close()


def init_db():
    db = get_db()
    db.executescript(
        """
        CREATE TABLE IF NOT EXISTS user (
            id          INTEGER PRIMARY KEY,
            email       TEXT UNIQUE NOT NULL,
            token_hash  TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS post (
            slug        TEXT PRIMARY KEY,
            title       TEXT NOT NULL,
            markdown    TEXT NOT NULL,
            created_at  TEXT NOT NULL,
            updated_at  TEXT NOT NULL
        );
        CREATE INDEX IF NOT EXISTS idx_post_created ON post(created_at);
        """
    )
    db.commit()


###############################################################################
# Post store
###############################################################################
class PostNotFound(LookupError):
    def __init__(self, slug: str):
        super().__init__(f"post not found: {slug}")
        self.slug = slug


class SlugTaken(ValueError):
    def __init__(self, slug: str):
        super().__init__(f"slug already in use: {slug}")
        self.slug = slug


class PostStore:
    """
    CRUD over the ``post`` table, keyed by slug.

    Every mutation commits before returning; a lookup of an unknown slug
    returns ``None``.
    """

    def __init__(self, db: sqlite3.Connection):
        self.db = db

    def list_all(self) -> list[sqlite3.Row]:
        return self.db.execute(
            "SELECT slug, title FROM post ORDER BY created_at DESC, slug"
        ).fetchall()

    def get(self, slug: str) -> sqlite3.Row | None:
        return self.db.execute(
            "SELECT slug, title, markdown, created_at, updated_at "
            "FROM post WHERE slug=?",
            (slug,),
        ).fetchone()

    def create(self, *, title: str, slug: str, markdown: str) -> None:
        now = utc_now().isoformat(timespec="seconds")
        try:
            self.db.execute(
                "INSERT INTO post (slug, title, markdown, created_at, updated_at) "
                "VALUES (?,?,?,?,?)",
                (slug, title, markdown, now, now),
            )
        except sqlite3.IntegrityError as exc:
            self.db.rollback()
            raise SlugTaken(slug) from exc
        self.db.commit()

    def update(self, slug: str, *, title: str, new_slug: str, markdown: str) -> None:
        """Replace the whole record at *slug*; *new_slug* may re-key it."""
        now = utc_now().isoformat(timespec="seconds")
        try:
            cur = self.db.execute(
                "UPDATE post SET slug=?, title=?, markdown=?, updated_at=? "
                "WHERE slug=?",
                (new_slug, title, markdown, now, slug),
            )
        except sqlite3.IntegrityError as exc:
            self.db.rollback()
            raise SlugTaken(new_slug) from exc
        if cur.rowcount == 0:
            self.db.rollback()
            raise PostNotFound(slug)
        self.db.commit()

    def delete(self, slug: str) -> bool:
        """Remove the post; a missing slug is a no-op (returns ``False``)."""
        cur = self.db.execute("DELETE FROM post WHERE slug=?", (slug,))
        self.db.commit()
        return cur.rowcount > 0


def get_store() -> PostStore:
    if "store" not in g:
        g.store = PostStore(get_db())
    return g.store


###############################################################################
# Request context + route target
###############################################################################
@dataclass(frozen=True)
class RequestContext:
    """Everything a workflow function may look at, resolved once per request."""

    params: Mapping[str, str] = field(default_factory=dict)
    form: Mapping[str, str] = field(default_factory=dict)
    session: Mapping[str, Any] = field(default_factory=dict)


def current_ctx(**params: str) -> RequestContext:
    return RequestContext(
        params=params,
        form=request.form.to_dict() if request.method == "POST" else {},
        session=dict(session),
    )


@dataclass(frozen=True)
class New:
    pass


@dataclass(frozen=True)
class Existing:
    slug: str


RouteTarget = New | Existing


def route_target(slug: str) -> RouteTarget:
    return New() if slug == NEW_SLUG else Existing(slug)


def _route_slug(ctx: RequestContext) -> str:
    slug = ctx.params.get("slug")
    if not slug:
        raise RuntimeError("slug is required")
    return slug


###############################################################################
# Authentication
###############################################################################
class LoginRequired(Unauthorized):
    description = "Sign in as the administrator to continue."


@dataclass(frozen=True)
class AdminSession:
    user_id: int
    email: str


def require_admin(ctx: RequestContext) -> AdminSession:
    """
    Gate for the admin surface.

    • no session at all        → ``LoginRequired`` (redirect to /login)
    • someone else's session   → 403
    """
    sess = ctx.session
    if not sess.get("logged_in") or not sess.get("user_id"):
        raise LoginRequired()
    email = (sess.get("email") or "").strip().lower()
    if email != admin_email():
        app.logger.warning("rejected non-admin session for %s", email or "?")
        abort(403)
    return AdminSession(user_id=sess["user_id"], email=email)


def validate_token(token: str, max_age: int = TOKEN_MAX_AGE) -> sqlite3.Row | None:
    """
    • Unsign + age-check in *one* step (`max_age` seconds).
    • Compare the payload (“handle”) against the hashed copy in the DB.
    """
    try:
        handle = signer.unsign(token, max_age=max_age).decode()
    except SignatureExpired:
        return None  # too old ➜ invalid
    except BadSignature:
        return None  # forged ➜ invalid

    for row in get_db().execute("SELECT id, email, token_hash FROM user"):
        if verify_token(row["token_hash"], handle):
            return row
    return None


def rate_limit(max_requests: int, window: int = 60):
    hits: DefaultDict[str, deque] = defaultdict(deque)

    def decorator(view):
        @wraps(view)
        def wrapped(*args, **kwargs):
            now = time()
            # left-most entry after ProxyFix = real client
            ip = (
                request.access_route[0] if request.access_route else request.remote_addr
            ) or "unknown"

            dq = hits[ip]
            while dq and now - dq[0] > window:
                dq.popleft()

            if len(dq) >= max_requests:
                retry_after = int(window - (now - dq[0]))
                return Response(
                    "Too many requests – try again later.",
                    status=429,
                    headers={"Retry-After": str(retry_after)},
                )

            dq.append(now)
            return view(*args, **kwargs)

        return wrapped

    return decorator


def _safe_next(target: str | None) -> str:
    """Only same-site relative paths are allowed as post-login targets."""
    if not target:
        return ADMIN_PATH
    parts = urlparse(target)
    if parts.scheme or parts.netloc or not target.startswith("/"):
        return ADMIN_PATH
    return target


def _csrf_token() -> str:
    """One token per session (rotates when the cookie does)."""
    return session.get("csrf", "")


app.jinja_env.globals["csrf_token"] = _csrf_token
app.jinja_env.globals["site_name"] = site_name
app.jinja_env.globals["version"] = __version__


###############################################################################
# CLI – create admin + token
###############################################################################
def _new_token() -> tuple[str, str]:
    handle = secrets.token_urlsafe(TOKEN_LEN)
    return signer.sign(handle).decode(), hash_token(handle)


def _create_admin(db, *, email: str) -> str:
    token, token_hash = _new_token()
    db.execute(
        "INSERT INTO user (email, token_hash) VALUES (?,?)",
        (email.strip().lower(), token_hash),
    )
    db.commit()
    return token


def _rotate_token(db) -> str:
    """Generate + store a *new* one-time token, return it for display."""
    token, token_hash = _new_token()
    db.execute("UPDATE user SET token_hash=? WHERE id=1", (token_hash,))
    db.commit()
    return token


@app.cli.command("init")
@click.option("--email", prompt=True, help="Admin email (must match ADMIN_EMAIL)")
def cli_init(email: str):
    """Initialise DB *and* create the admin account."""
    init_db()  # no-op if already there
    db = get_db()
    if db.execute("SELECT 1 FROM user LIMIT 1").fetchone():
        raise click.ClickException("An admin already exists – use `token` instead.")
    token = _create_admin(db, email=email)

    click.secho("\n✅  Admin created.", fg="green")
    if email.strip().lower() != (app.config.get("ADMIN_EMAIL") or "").strip().lower():
        click.secho("⚠️   ADMIN_EMAIL does not match this address.", fg="yellow")
    click.echo(f"\nOne-time login token:\n\n{token}\n")
    click.echo(f"Paste it into the login form at /login within {TOKEN_MAX_AGE} s.")


@app.cli.command("token")
def cli_token():
    """Rotate the admin’s one-time login token."""
    db = get_db()
    if not db.execute("SELECT 1 FROM user LIMIT 1").fetchone():
        raise click.ClickException("No admin yet – run `init` first.")
    token = _rotate_token(db)

    click.secho("\n🔑  Fresh login token generated.\n", fg="yellow")
    click.echo(f"{token}\n")
    click.echo(f"Paste it into the login form at /login within {TOKEN_MAX_AGE} s.")


###############################################################################
# Post workflow
###############################################################################
def view_post(ctx: RequestContext, store: PostStore) -> dict:
    """Public page: title + rendered HTML (the markdown source stays home)."""
    slug = _route_slug(ctx)
    post = store.get(slug)
    if post is None:
        abort(404, description=f'The post with slug "{slug}" could not be found.')
    return {"title": post["title"], "html": render_markdown(post["markdown"])}


def list_posts(ctx: RequestContext, store: PostStore) -> dict:
    return {"posts": store.list_all()}


def admin_index(ctx: RequestContext, store: PostStore) -> dict:
    require_admin(ctx)
    return {"posts": store.list_all()}


def admin_post(ctx: RequestContext, store: PostStore) -> dict:
    require_admin(ctx)
    target = route_target(_route_slug(ctx))
    if isinstance(target, New):
        return {}
    post = store.get(target.slug)
    if post is None:
        abort(
            404, description=f'The post with slug "{target.slug}" could not be found.'
        )
    return {"post": post}


def validate_post_form(form: Mapping[str, str]) -> tuple[dict, dict[str, str | None]]:
    """
    Return ``(fields, errors)``; ``errors`` has one key per field, ``None``
    where the field is fine.
    """
    fields = {
        "title": (form.get("title") or "").strip(),
        "slug": (form.get("slug") or "").strip(),
        "markdown": form.get("markdown") or "",
    }
    errors: dict[str, str | None] = {
        "title": None if fields["title"] else "Title is required",
        "slug": None if fields["slug"] else "Slug is required",
        "markdown": None if fields["markdown"].strip() else "Markdown is required",
    }
    if fields["slug"]:
        if not SLUG_RE.match(fields["slug"]):
            errors["slug"] = "Slug may only contain letters, digits, - and _"
        elif fields["slug"].lower() in RESERVED_SLUGS:
            errors["slug"] = "Slug is reserved"
    return fields, errors


def has_errors(errors: Mapping[str, str | None]) -> bool:
    return any(v is not None for v in errors.values())


def admin_post_action(ctx: RequestContext, store: PostStore) -> Response | dict:
    """
    Handle the admin form.

    Returns a redirect to the admin listing on success, or the field →
    message map (with the submitted values) when the form has to be shown
    again.
    """
    require_admin(ctx)
    target = route_target(_route_slug(ctx))
    intent = ctx.form.get("intent")
    if intent not in INTENTS:
        abort(400, description="Unknown intent.")

    if intent == "delete":
        if isinstance(target, New):
            abort(400, description="Nothing to delete yet.")
        if store.delete(target.slug):
            app.logger.info("deleted post %s", target.slug)
        return redirect(ADMIN_PATH)

    fields, errors = validate_post_form(ctx.form)
    if has_errors(errors):
        return {"errors": errors, "values": fields}

    try:
        if isinstance(target, New):
            store.create(**fields)
            app.logger.info("created post %s", fields["slug"])
        else:
            store.update(
                target.slug,
                title=fields["title"],
                new_slug=fields["slug"],
                markdown=fields["markdown"],
            )
            app.logger.info("updated post %s → %s", target.slug, fields["slug"])
    except SlugTaken:
        errors["slug"] = "Slug is already in use"
        return {"errors": errors, "values": fields}
    except PostNotFound as exc:
        abort(404, description=f'The post with slug "{exc.slug}" could not be found.')
    return redirect(ADMIN_PATH)


###############################################################################
# Templates
###############################################################################
def wrap(body: str) -> str:
    """Glue prolog + page-specific body + epilog."""
    return TEMPL_PROLOG + body + TEMPL_EPILOG


TEMPL_PROLOG = """
<!doctype html>
<html lang="en">
<title>{{ title or site_name() }}</title>
<meta name="viewport" content="width=device-width, initial-scale=1">
<meta charset="utf-8">
<style>
html{font-family:-apple-system,BlinkMacSystemFont,"Segoe UI",Roboto,"Helvetica Neue",Arial,sans-serif}
body{font-size:1.1rem;line-height:1.6;max-width:44em;margin:auto;color:#c9c9c9;background:#222;padding:13px}
a{color:#fff}h1{border-bottom:2px solid #4a4a4a;text-align:center}
pre{background:#4a4a4a;padding:1em;overflow-x:auto}code{background:#4a4a4a;padding:0 .3em}
input,textarea{width:100%;color:#c9c9c9;background:#4a4a4a;border:1px solid #4a4a4a;border-radius:4px;padding:6px 10px;box-sizing:border-box}
.error{color:#f66;font-style:italic}.admin{display:grid;grid-template-columns:1fr 3fr;gap:1.5rem}
.danger{background:#c00;color:#fff}
</style>
<body>
<nav style="display:flex;gap:1rem;">
  <a href="{{ url_for('list_posts_view') }}">{{ site_name() }}</a>
  {% if session.get('logged_in') %}
    <a href="{{ url_for('admin_index_view') }}">admin</a>
    <a href="{{ url_for('logout') }}" style="margin-left:auto;">logout</a>
  {% else %}
    <a href="{{ url_for('login') }}" style="margin-left:auto;">login</a>
  {% endif %}
</nav>
<div class="container">
"""

TEMPL_EPILOG = """
<footer style="margin-top:3rem;font-size:.8em;color:#888;">{{ site_name() }} v{{ version }}</footer>
</div> <!-- container -->
</body>
</html>
"""

TEMPL_POST = wrap("""
{% block body %}
<main>
  <h1>{{ post.title }}</h1>
  <div class="e-content">{{ post.html|safe }}</div>
</main>
{% endblock %}
""")

TEMPL_POSTS = wrap("""
{% block body %}
<main>
  <h1>Posts</h1>
  <ul>
  {% for p in posts %}
    <li><a href="{{ url_for('post_view', slug=p['slug']) }}">{{ p['title'] }}</a></li>
  {% else %}
    <li>Nothing here yet.</li>
  {% endfor %}
  </ul>
</main>
{% endblock %}
""")

TEMPL_ADMIN = wrap("""
{% block body %}
<h1>Blog Admin</h1>
<div class="admin">
  <nav>
    <ul>
    {% for p in posts %}
      <li><a href="{{ url_for('admin_post_view', slug=p['slug']) }}">{{ p['title'] }}</a></li>
    {% endfor %}
    </ul>
    <a href="{{ url_for('admin_post_view', slug='new') }}">+ New Post</a>
  </nav>
  <main>
  {% if form is defined %}
    {% set errors = form.get('errors', {}) %}
    {% set values = form.get('values') or form.get('post') or {} %}
    <form method="post">
      {% if csrf_token() %}
      <input type="hidden" name="csrf" value="{{ csrf_token() }}">
      {% endif %}
      <p>
        <label for="title">Title:
          {% if errors.get('title') %}<em class="error">{{ errors['title'] }}</em>{% endif %}
        </label>
        <input id="title" type="text" name="title" placeholder="Title" value="{{ values['title'] or '' }}">
      </p>
      <p>
        <label for="slug">Slug:
          {% if errors.get('slug') %}<em class="error">{{ errors['slug'] }}</em>{% endif %}
        </label>
        <input id="slug" type="text" name="slug" placeholder="slug" value="{{ values['slug'] or '' }}">
      </p>
      <p>
        <label for="markdown">Markdown:
          {% if errors.get('markdown') %}<em class="error">{{ errors['markdown'] }}</em>{% endif %}
        </label>
        <textarea id="markdown" name="markdown" rows="20" placeholder="Your post content...">{{ values['markdown'] or '' }}</textarea>
      </p>
      <div style="display:flex;justify-content:flex-end;gap:1rem;">
        {% if not is_new %}
        <button type="submit" name="intent" value="delete" class="danger">Delete Post</button>
        {% endif %}
        <button type="submit" name="intent" value="{{ 'create' if is_new else 'update' }}">
          {{ 'Create Post' if is_new else 'Update Post' }}
        </button>
      </div>
    </form>
  {% else %}
    <p>Pick a post on the left, or write a new one.</p>
  {% endif %}
  </main>
</div>
{% endblock %}
""")

TEMPL_LOGIN = wrap("""
{% block body %}
<hr>
<form method="post" id="token-form">
  {% if csrf_token() %}
  <input type="hidden" name="csrf" value="{{ csrf_token() }}">
  {% endif %}
  <input type="hidden" name="next" value="{{ next or '' }}">
  <label for="token">token</label>
  <input id="token" name="token" type="password" autocomplete="current-password">
  <button type="submit" style="margin-top:1rem;">Sign&nbsp;in</button>
</form>
{% endblock %}
""")

TEMPL_404 = wrap("""
{% block body %}
  <hr>
  <h2 style="margin-top:0">Page not found</h2>
  <p>{{ message }}
     <a href="{{ url_for('list_posts_view') }}">Back to the posts</a>.</p>
{% endblock %}
""")

TEMPL_500 = wrap("""
{% block body %}
  <hr>
  <h2 style="margin-top:0">Internal Server Error</h2>
  <p>Oh no, something went wrong. Please try again in a minute.</p>
{% endblock %}
""")


###############################################################################
# Views
###############################################################################
@app.route("/")
def index():
    return redirect(url_for("list_posts_view"))


@app.route("/posts")
def list_posts_view():
    data = list_posts(current_ctx(), get_store())
    return render_template_string(TEMPL_POSTS, title=site_name(), **data)


@app.route("/posts/<slug>")
def post_view(slug):
    post = view_post(current_ctx(slug=slug), get_store())
    return render_template_string(TEMPL_POST, title=post["title"], post=post)


@app.route("/posts/admin")
def admin_index_view():
    data = admin_index(current_ctx(), get_store())
    return render_template_string(TEMPL_ADMIN, title="Blog Admin", **data)


@app.route("/posts/admin/<slug>", methods=["GET", "POST"])
def admin_post_view(slug):
    ctx = current_ctx(slug=slug)
    store = get_store()
    if request.method == "POST":
        result = admin_post_action(ctx, store)
        if isinstance(result, Response):
            return result
        form = result
    else:
        form = admin_post(ctx, store)
    return render_template_string(
        TEMPL_ADMIN,
        title="Blog Admin",
        posts=store.list_all(),
        form=form,
        is_new=isinstance(route_target(slug), New),
    )


@app.route("/login", methods=["GET", "POST"])
@rate_limit(max_requests=5, window=60)
def login():
    # ── read token only from the form ──────────────────────────────
    token = request.form.get("token", "").strip()
    nxt = request.values.get("next", "")

    if request.method == "POST" and token:
        user = validate_token(token)
        if user is not None:
            # ── token matched → burn it right away ─────────────────────
            db = get_db()
            db.execute(
                "UPDATE user SET token_hash=? WHERE id=?",
                (hash_token(secrets.token_hex(16)), user["id"]),
            )
            db.commit()

            session.clear()
            session.permanent = True
            session["logged_in"] = True
            session["user_id"] = user["id"]
            session["email"] = user["email"]
            session["csrf"] = secrets.token_hex(16)
            app.logger.info("admin %s signed in", user["email"])
            return redirect(_safe_next(nxt))
        app.logger.warning("rejected login token")

    return render_template_string(TEMPL_LOGIN, title=site_name(), next=nxt)


@app.route("/logout")
def logout():
    session.clear()
    return redirect(url_for("list_posts_view"))


@app.before_request
def csrf_protect():
    # ➊ read-only verbs ⇒ always allowed
    if request.method in SAFE_METHODS:
        return

    # ➋ no logged-in flag yet ⇒ allow (covers /login POST)
    if not session.get("logged_in"):
        return

    # ➌ for authenticated users we REQUIRE a valid token
    token = session.get("csrf", "")
    sent = request.form.get("csrf") or request.headers.get("X-CSRFToken", "")
    if not token or not secrets.compare_digest(token, sent):
        abort(403)


@app.after_request
def sec_headers(resp):
    resp.headers.update(
        {
            "X-Frame-Options": "DENY",
            "X-Content-Type-Options": "nosniff",
            "Referrer-Policy": "strict-origin-when-cross-origin",
        }
    )
    return resp


###############################################################################
# Error pages
###############################################################################
@app.errorhandler(LoginRequired)
def login_required(exc):
    return redirect(url_for("login", next=request.full_path.rstrip("?")))


@app.errorhandler(404)
def not_found(exc):
    """Site-wide “Not Found” page."""
    message = "The URL you asked for doesn’t exist."
    if isinstance(exc, NotFound) and exc.description != NotFound.description:
        message = exc.description
    return render_template_string(TEMPL_404, title=site_name(), message=message), 404


@app.errorhandler(500)
def internal_error(exc):
    """
    Generic 500 page for production.
    • In development the Werkzeug debugger still shows the interactive
      traceback, because Flask bypasses this handler while debug is on.
    """
    app.logger.exception("unhandled error on %s", request.path)
    return render_template_string(TEMPL_500, title=site_name()), 500


###############################################################################
# main
###############################################################################
if __name__ == "__main__":
    app.run(debug=True)
