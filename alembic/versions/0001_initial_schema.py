"""Initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None

user_role = sa.Enum('admin', 'teacher', 'student', name='userrole')
user_status = sa.Enum('active', 'inactive', name='userstatus')
enrollment_status = sa.Enum('active', 'completed', 'dropped', name='enrollmentstatus')
assignment_type = sa.Enum('project', 'task', 'test', name='assignmenttype')
grading_schema = sa.Enum('points', 'percentage', 'pass_fail', name='gradingschema')
grade_status = sa.Enum('draft', 'pending_release', 'released', name='gradestatus')
notification_channel = sa.Enum('email', 'in_app', name='notificationchannel')
notification_status = sa.Enum('pending', 'sent', 'failed', name='notificationstatus')


def upgrade() -> None:
    # Directory and registry tables (read-only to the grading engine)
    op.create_table('users',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('role', user_role, nullable=False),
        sa.Column('status', user_status, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('classes',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('code', sa.String(length=50), nullable=False),
        sa.Column('instructor_ids', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('code')
    )

    op.create_table('enrollments',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('class_id', sa.String(length=36), nullable=False),
        sa.Column('student_id', sa.String(length=36), nullable=False),
        sa.Column('status', enrollment_status, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(['class_id'], ['classes.id'], ),
        sa.ForeignKeyConstraint(['student_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('class_id', 'student_id', name='uq_enrollments_class_student')
    )

    op.create_table('assignments',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('class_id', sa.String(length=36), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('type', assignment_type, nullable=False),
        sa.Column('due_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('publish_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('grading_schema', grading_schema, nullable=False),
        sa.Column('max_points', sa.Float(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(['class_id'], ['classes.id'], ),
        sa.PrimaryKeyConstraint('id')
    )

    # Grade ledger
    op.create_table('grades',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('assignment_id', sa.String(length=36), nullable=False),
        sa.Column('student_id', sa.String(length=36), nullable=False),
        sa.Column('score', sa.Float(), nullable=True),
        sa.Column('letter_grade', sa.String(length=20), nullable=True),
        sa.Column('feedback', sa.Text(), nullable=False),
        sa.Column('status', grade_status, nullable=False),
        sa.Column('released_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('revision', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['assignment_id'], ['assignments.id'], ),
        sa.ForeignKeyConstraint(['student_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('assignment_id', 'student_id', name='uq_grades_assignment_student')
    )

    op.create_table('grade_history',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('grade_id', sa.String(length=36), nullable=False),
        sa.Column('sequence', sa.Integer(), nullable=False),
        sa.Column('status', grade_status, nullable=False),
        sa.Column('score', sa.Float(), nullable=True),
        sa.Column('letter_grade', sa.String(length=20), nullable=True),
        sa.Column('feedback', sa.Text(), nullable=False),
        sa.Column('actor_id', sa.String(length=36), nullable=True),
        sa.Column('changed_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['grade_id'], ['grades.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('grade_id', 'sequence', name='uq_grade_history_grade_sequence')
    )

    # Review groups
    op.create_table('student_groups',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('class_id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('member_ids', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(['class_id'], ['classes.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('class_id', 'name', name='uq_student_groups_class_name')
    )

    op.create_table('grader_groups',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('class_id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('grader_ids', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(['class_id'], ['classes.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('class_id', 'name', name='uq_grader_groups_class_name')
    )

    op.create_table('group_bundles',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('class_id', sa.String(length=36), nullable=False),
        sa.Column('student_group_id', sa.String(length=36), nullable=False),
        sa.Column('grader_group_id', sa.String(length=36), nullable=False),
        sa.Column('notes', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(['class_id'], ['classes.id'], ),
        sa.ForeignKeyConstraint(['grader_group_id'], ['grader_groups.id'], ),
        sa.ForeignKeyConstraint(['student_group_id'], ['student_groups.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('class_id', 'student_group_id', 'grader_group_id', name='uq_group_bundles_class_groups')
    )

    op.create_table('notifications',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('type', sa.String(length=100), nullable=False),
        sa.Column('payload', sa.JSON(), nullable=False),
        sa.Column('channel', notification_channel, nullable=False),
        sa.Column('status', notification_status, nullable=False),
        sa.Column('sent_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('error', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )

    # Create indexes
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_enrollments_class_id', 'enrollments', ['class_id'], unique=False)
    op.create_index('ix_enrollments_student_id', 'enrollments', ['student_id'], unique=False)
    op.create_index('idx_assignments_class_due', 'assignments', ['class_id', 'due_at'], unique=False)
    op.create_index('ix_grades_assignment_id', 'grades', ['assignment_id'], unique=False)
    op.create_index('ix_grades_student_id', 'grades', ['student_id'], unique=False)
    op.create_index('ix_grade_history_grade_id', 'grade_history', ['grade_id'], unique=False)
    op.create_index('ix_student_groups_class_id', 'student_groups', ['class_id'], unique=False)
    op.create_index('ix_grader_groups_class_id', 'grader_groups', ['class_id'], unique=False)
    op.create_index('ix_group_bundles_class_id', 'group_bundles', ['class_id'], unique=False)
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'], unique=False)


def downgrade() -> None:
    # Drop indexes
    op.drop_index('ix_notifications_user_id', table_name='notifications')
    op.drop_index('ix_group_bundles_class_id', table_name='group_bundles')
    op.drop_index('ix_grader_groups_class_id', table_name='grader_groups')
    op.drop_index('ix_student_groups_class_id', table_name='student_groups')
    op.drop_index('ix_grade_history_grade_id', table_name='grade_history')
    op.drop_index('ix_grades_student_id', table_name='grades')
    op.drop_index('ix_grades_assignment_id', table_name='grades')
    op.drop_index('idx_assignments_class_due', table_name='assignments')
    op.drop_index('ix_enrollments_student_id', table_name='enrollments')
    op.drop_index('ix_enrollments_class_id', table_name='enrollments')
    op.drop_index('ix_users_email', table_name='users')

    # Drop tables
    op.drop_table('notifications')
    op.drop_table('group_bundles')
    op.drop_table('grader_groups')
    op.drop_table('student_groups')
    op.drop_table('grade_history')
    op.drop_table('grades')
    op.drop_table('assignments')
    op.drop_table('enrollments')
    op.drop_table('classes')
    op.drop_table('users')

    # Drop enum types (no-op on databases without named enums)
    for enum_type in (notification_status, notification_channel, grade_status, grading_schema,
                      assignment_type, enrollment_status, user_status, user_role):
        enum_type.drop(op.get_bind(), checkfirst=True)
