from flask import Blueprint, current_app, send_from_directory

pages = Blueprint('pages', __name__)


@pages.route('/')
def index():
    return send_from_directory(current_app.static_folder, 'index.html')


@pages.route('/<any(profile, social, game):name>')
def page_alias(name):
    return send_from_directory(current_app.static_folder, f'{name}.html')
