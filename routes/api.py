from datetime import datetime
from flask import jsonify
from flask_login import login_required, current_user
from flask_wtf.csrf import generate_csrf
from . import api_bp
from models import db, Notification
from services.notification_service import deliver_due_notifications

@api_bp.route('/csrf-token', methods=['GET'])
def csrf_token():
    return jsonify({'csrf_token': generate_csrf()})

@api_bp.route('/notifications', methods=['GET'])
@login_required
def get_notifications():
    deliver_due_notifications(current_user.id, datetime.now())

    notifications = (Notification.query.filter_by(user_id=current_user.id, is_read=False)
        .order_by(Notification.created_at.desc()).all())

    return jsonify([{
        'id': n.id,
        'key': n.key,
        'title': n.title,
        'message': n.message,
        'created_at': n.created_at.isoformat()
    } for n in notifications])

@api_bp.route('/notifications/mark_read/<int:notif_id>', methods=['POST'])
@login_required
def mark_notification_read(notif_id):
    notif = db.session.get(Notification, notif_id)
    if notif and notif.user_id == current_user.id:
        notif.is_read = True
        db.session.commit()
    return jsonify({'status': 'success'})

@api_bp.route('/notifications/mark_all_read', methods=['POST'])
@login_required
def mark_all_read():
    Notification.query.filter_by(user_id=current_user.id, is_read=False).update({'is_read': True})
    db.session.commit()
    return jsonify({'status': 'success'})
