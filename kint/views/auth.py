from urllib.parse import urlparse

from flask import Blueprint, flash, redirect, render_template, request, url_for
from flask_login import current_user, login_required, login_user, logout_user

from kint.auth import authenticate, end_session, start_session
from kint.forms import LoginForm
from kint.i18n import current_language, get_translation
from kint.views.admin import DASHBOARD_ENDPOINT

bp = Blueprint('auth', __name__, url_prefix='/admin')


@bp.route('/login/', methods=['GET', 'POST'])
def login():
    lang = current_language()
    if current_user.is_authenticated:
        return redirect(url_for(DASHBOARD_ENDPOINT))

    form = LoginForm()
    status = 200
    if form.validate_on_submit():
        admin = authenticate(form.email.data, form.password.data)
        if admin is not None:
            login_user(admin, remember=form.remember.data)
            start_session(admin)
            flash(get_translation('auth.login.success', lang), 'success')
            next_url = request.args.get('next')
            if next_url and urlparse(next_url).netloc == '' and next_url.startswith('/'):
                return redirect(next_url)
            return redirect(url_for(DASHBOARD_ENDPOINT))
        flash(get_translation('auth.login.error', lang), 'danger')
        status = 401
    elif request.method == 'POST':
        flash(get_translation('auth.login.error', lang), 'danger')
        status = 400

    return render_template('auth/login.html', form=form), status


@bp.route('/logout/')
@login_required
def logout():
    logout_user()
    end_session()
    flash(get_translation('auth.logout.success', current_language()), 'info')
    return redirect(url_for('auth.login'))
