from functools import wraps
from flask import jsonify
from flask_login import LoginManager, current_user
from database import db

login_manager = LoginManager()

@login_manager.user_loader
def load_user(user_id):
    from models import User
    return db.session.get(User, int(user_id))

@login_manager.unauthorized_handler
def unauthorized():
    return jsonify({'success': False, 'error': 'Authentication required'}), 401

def _role_required(check, message):
    def decorator(view):
        @wraps(view)
        def wrapped(*args, **kwargs):
            if not current_user.is_authenticated:
                return unauthorized()
            if not check(current_user):
                return jsonify({'success': False, 'error': message}), 403
            return view(*args, **kwargs)
        return wrapped
    return decorator

sme_required = _role_required(lambda user: user.is_sme, 'This action requires company account')
candidate_required = _role_required(lambda user: user.is_candidate, 'This action requires candidate account')
