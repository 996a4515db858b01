# Copyright (c) 2009-2010 Six Apart Ltd.
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
# * Redistributions of source code must retain the above copyright notice,
#   this list of conditions and the following disclaimer.
#
# * Redistributions in binary form must reproduce the above copyright notice,
#   this list of conditions and the following disclaimer in the documentation
#   and/or other materials provided with the distribution.
#
# * Neither the name of Six Apart Ltd. nor the names of its contributors may
#   be used to endorse or promote products derived from this software without
#   specific prior written permission.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS"
# AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE
# IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE
# ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE
# LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR
# CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF
# SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS
# INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN
# CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE)
# ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
# POSSIBILITY OF SUCH DAMAGE.

"""

GitHub resources, defined on the request, paging and rehydration machinery.

These classes cover the parts of the API that need more than field
declarations: commits that fetch their stats on demand, comparisons whose
commits are read either from the comparison itself or page by page,
statistics endpoints that answer before their data is ready, issue queries
built up parameter by parameter, and users that each session keeps one copy
of.

"""

import enum
import logging
import time

from ghobjects import fields
from ghobjects.dataobject import DataObject
from ghobjects.errors import DesignError
from ghobjects.iterable import LegacyArrayStrategy, PaginatedStrategy
from ghobjects.listobject import ListObject, ListOf
from ghobjects.promise import PromiseObject


log = logging.getLogger('ghobjects.resources')


class RemoteObject(PromiseObject):

    """A resource of the API, decoded by a `Session`.

    Its `root` is the session that decoded it, injected by the request.

    """

    root = fields.Injected('root')

    def root_request(self):
        if self.root is None:
            raise DesignError('%r was not decoded by a session and cannot make requests'
                % (self,))
        return self.root.create_request()


class User(RemoteObject):

    """A GitHub account. Each session keeps one `User` per login."""

    intern_key = 'login'

    login      = fields.Field(required=True)
    id         = fields.Field()
    name       = fields.Field()
    email      = fields.Field()
    type       = fields.Field()
    site_admin = fields.Field()
    html_url   = fields.Field()
    avatar_url = fields.Field()

    def delivery_request(self):
        return self.root_request().with_path('/users', self.login)


class Repository(RemoteObject):

    id             = fields.Field()
    name           = fields.Field(required=True)
    full_name      = fields.Field(required=True)
    description    = fields.Field()
    private        = fields.Field()
    html_url       = fields.Field()
    url            = fields.Field()
    default_branch = fields.Field()
    owner          = fields.Object(User)

    def api_tail_url(self, tail):
        return '/repos/%s/%s' % (self.full_name, tail.lstrip('/'))

    def get_commit(self, sha):
        commit = (self.root_request()
            .with_path(self.api_tail_url('commits'), sha)
            .fetch(Commit))
        return self.root.rehydrator.attach(commit, self)

    def list_commits(self, sha=None, path=None, author=None):
        return (self.root_request()
            .with_path(self.api_tail_url('commits'))
            .with_param('sha', sha)
            .with_param('path', path)
            .with_param('author', author)
            .to_iterable(Commit, initializer=self.root.rehydrator.binder(self)))

    def compare(self, base, head, paginated=False):
        """Compares two commits, branches or tags.

        With `paginated`, the comparison's commits are listed page by page
        through `Compare.list_commits()` instead of being read from the
        comparison's own (truncated) list.

        """
        compare = (self.root_request()
            .inject('use_paginated_commits', paginated)
            .with_path(self.api_tail_url('compare'), '%s...%s' % (base, head))
            .fetch(Compare))
        return compare.late_bind(self)

    def query_issues(self):
        return IssueQueryBuilder(self)

    def statistics(self):
        return RepositoryStatistics(self)


class GitUser(DataObject):

    """The name, email and time recorded for a commit's author or
    committer."""

    name  = fields.Field()
    email = fields.Field()
    date  = fields.Datetime()


class Tree(DataObject):

    sha = fields.Field()
    url = fields.Field()


class ShortInfo(DataObject):

    """The git-level data of a commit."""

    author        = fields.Object(GitUser)
    committer     = fields.Object(GitUser)
    message       = fields.Field()
    comment_count = fields.Field()
    tree          = fields.Object(Tree)
    url           = fields.Field()


class CommitStats(DataObject):

    total     = fields.Field()
    additions = fields.Field()
    deletions = fields.Field()


class CommitFile(DataObject):

    filename          = fields.Field(required=True)
    previous_filename = fields.Field()
    status            = fields.Field()
    additions         = fields.Field()
    deletions         = fields.Field()
    changes           = fields.Field()
    sha               = fields.Field()
    patch             = fields.Field()
    blob_url          = fields.Field()
    raw_url           = fields.Field()


class CommitPointer(DataObject):

    sha      = fields.Field()
    url      = fields.Field()
    html_url = fields.Field()


class Commit(RemoteObject):

    """A commit in a repository.

    Commits in lists lack their `stats` and `files`; reading either fetches
    the commit in full.

    """

    # The API returns at most this many files in one commit response.
    FILES_PER_RESPONSE = 300

    repository = fields.Owner()

    sha       = fields.Field(required=True)
    node_id   = fields.Field()
    url       = fields.Field()
    html_url  = fields.Field()
    commit    = fields.Object(ShortInfo)
    author    = fields.Object(User)
    committer = fields.Object(User)
    parents   = fields.List(fields.Object(CommitPointer), default=list)
    stats     = fields.Object(CommitStats, lazy=True)
    files     = fields.List(fields.Object(CommitFile), lazy=True)

    def delivery_request(self):
        return (self.root_request()
            .with_path(self.repository.api_tail_url('commits'), self.sha))

    @property
    def lines_added(self):
        return self.stats.additions

    @property
    def lines_deleted(self):
        return self.stats.deletions

    @property
    def lines_changed(self):
        return self.stats.total

    def list_files(self):
        """Returns the files changed by the commit.

        Commits changing more files than one response holds page through
        them.

        """
        files = self.files
        if files is not None and len(files) < self.FILES_PER_RESPONSE:
            return LegacyArrayStrategy(files)
        return (self.delivery_request()
            .to_iterable(CommitFile, page_cls=Commit, items=lambda c: c.files))

    def get_author(self):
        """Returns the canonical `User` for the commit's author, or `None`
        for authors without a GitHub account."""
        if self.author is None:
            return None
        return self.root.get_user(self.author.login)

    def list_parents(self):
        return [self.repository.get_commit(p.sha) for p in self.parents]


class Compare(RemoteObject):

    """The comparison of two commits."""

    class Status(enum.Enum):
        AHEAD     = 'ahead'
        BEHIND    = 'behind'
        DIVERGED  = 'diverged'
        IDENTICAL = 'identical'

    repository = fields.Owner()
    use_paginated_commits = fields.Injected('use_paginated_commits', default=False)

    url               = fields.Field()
    html_url          = fields.Field()
    permalink_url     = fields.Field()
    diff_url          = fields.Field()
    patch_url         = fields.Field()
    status            = fields.Enum(Status)
    ahead_by          = fields.Field()
    behind_by         = fields.Field()
    total_commits     = fields.Field()
    base_commit       = fields.Object(Commit)
    merge_base_commit = fields.Object(Commit)
    page_commits      = fields.List(fields.Object(Commit), api_name='commits', default=list)
    files             = fields.List(fields.Object(CommitFile), default=list)

    def late_bind(self, owner):
        return self.root.rehydrator.attach(self, owner)

    def list_commits(self):
        """Returns the commits between the compared commits.

        If the comparison was requested paginated, the commits are fetched
        page by page from the comparison endpoint. Otherwise they are the ones
        the comparison response held, which the API truncates.

        """
        if self.use_paginated_commits:
            if not self.url:
                raise DesignError('%r has no URL to page its commits from' % (self,))
            request = (self.root_request()
                .inject('use_paginated_commits', True)
                .with_url(self.url))
            return PaginatedStrategy(self.root, request.build(), Compare,
                items=lambda page: page.page_commits,
                initializer=self.root.rehydrator.binder(self.repository),
                page_size=self.root.page_size)
        return LegacyArrayStrategy(self.page_commits)

    @property
    def commits(self):
        return self.list_commits().with_page_size(100).to_array()


class IssueState(enum.Enum):
    OPEN   = 'open'
    CLOSED = 'closed'
    ALL    = 'all'


class IssueSort(enum.Enum):
    CREATED  = 'created'
    UPDATED  = 'updated'
    COMMENTS = 'comments'


class Direction(enum.Enum):
    ASC  = 'asc'
    DESC = 'desc'


class Label(DataObject):

    name        = fields.Field(required=True)
    color       = fields.Field()
    description = fields.Field()


class Issue(RemoteObject):

    repository = fields.Owner()

    number     = fields.Field(required=True)
    title      = fields.Field()
    state      = fields.Enum(IssueState)
    body       = fields.Field()
    user       = fields.Object(User)
    labels     = fields.List(fields.Object(Label), default=list)
    comments   = fields.Field()
    html_url   = fields.Field()
    created_at = fields.Datetime()
    updated_at = fields.Datetime()
    closed_at  = fields.Datetime()


class IssueQueryBuilder(object):

    """Builds up a query for a repository's issues.

    >>> issues = (repository.query_issues()
    ...     .state(IssueState.OPEN)
    ...     .label('bug')
    ...     .label('help wanted')
    ...     .list())

    """

    def __init__(self, repository):
        self.repository = repository
        self.req = repository.root_request()

    def state(self, state):
        self.req.with_param('state', state, enum=IssueState)
        return self

    def sort(self, sort):
        self.req.with_param('sort', sort, enum=IssueSort)
        return self

    def direction(self, direction):
        self.req.with_param('direction', direction, enum=Direction)
        return self

    def since(self, when):
        self.req.with_param('since', when)
        return self

    def label(self, label):
        """Adds a label the issues must all have."""
        if label is not None and label.strip():
            self.req.append_param('labels', label)
        return self

    def mentioned(self, login):
        self.req.with_param('mentioned', login)
        return self

    def milestone(self, milestone):
        self.req.with_param('milestone', milestone)
        return self

    def page_size(self, size):
        self.req.page_size(size)
        return self

    def list(self):
        return (self.req
            .with_path(self.repository.api_tail_url('issues'))
            .to_iterable(Issue, initializer=self.repository.root.rehydrator.binder(self.repository)))


class PositionalObject(DataObject):

    """A `DataObject` the API represents as a JSON array of values in a fixed
    order, named by `positions`."""

    positions = ()

    def update_from_dict(self, data, context=None):
        if isinstance(data, list):
            data = dict(zip(self.positions, data))
        super(PositionalObject, self).update_from_dict(data, context)


class CodeFrequency(PositionalObject):

    positions = ('week', 'additions', 'deletions')

    week      = fields.Field(required=True)
    additions = fields.Field()
    deletions = fields.Field()


class CodeFrequencyList(ListObject):

    entries = fields.List(fields.Object(CodeFrequency))

    # The endpoint answers with an empty object while it computes.
    not_ready_is_empty = True


class PunchCardItem(PositionalObject):

    positions = ('day_of_week', 'hour_of_day', 'commits')

    day_of_week = fields.Field(required=True)
    hour_of_day = fields.Field(required=True)
    commits     = fields.Field()


class CommitActivity(DataObject):

    days  = fields.List(fields.Field(), default=list)
    total = fields.Field()
    week  = fields.Field()


class Week(DataObject):

    week      = fields.Field(api_name='w')
    additions = fields.Field(api_name='a')
    deletions = fields.Field(api_name='d')
    commits   = fields.Field(api_name='c')


class ContributorStats(DataObject):

    author = fields.Object(User)
    total  = fields.Field()
    weeks  = fields.List(fields.Object(Week), default=list)

    def get_week(self, timestamp):
        for week in self.weeks:
            if week.week == timestamp:
                return week
        raise KeyError(timestamp)


class Participation(DataObject):

    all_commits   = fields.List(fields.Field(), api_name='all', default=list)
    owner_commits = fields.List(fields.Field(), api_name='owner', default=list)


class RepositoryStatistics(object):

    """The computed statistics of a repository.

    GitHub computes statistics in the background. Until they are ready the
    endpoints answer ``202 Accepted``.

    """

    MAX_WAIT_ITERATIONS = 3

    # Seconds between checks for contributor statistics.
    WAIT_SLEEP_INTERVAL = 5

    def __init__(self, repository):
        self.repository = repository

    def _request(self, tail):
        return (self.repository.root_request()
            .with_path(self.repository.api_tail_url('stats/' + tail)))

    def code_frequency(self):
        """Returns the weekly additions and deletions, or an empty list if
        they are not computed yet."""
        weeks = self._request('code_frequency').fetch(CodeFrequencyList)
        return list(weeks)

    def commit_activity(self):
        return self._request('commit_activity').to_iterable(CommitActivity)

    def contributor_stats(self, wait_till_ready=True):
        """Returns the contributor statistics as a `PagedIterable`.

        If the statistics are not ready yet, this waits for them when
        `wait_till_ready`, checking up to `MAX_WAIT_ITERATIONS` more times.
        Returns `None` if they are still not ready.

        """
        request = self._request('contributors')
        status = request.fetch_status()
        attempts = 0
        while status == 202:
            if not wait_till_ready or attempts >= self.MAX_WAIT_ITERATIONS:
                log.debug('Contributor statistics for %s are not ready',
                    self.repository.full_name)
                return None
            attempts += 1
            time.sleep(self.WAIT_SLEEP_INTERVAL)
            status = request.fetch_status()
        return request.to_iterable(ContributorStats)

    def participation(self):
        return self._request('participation').fetch(Participation)

    def punch_card(self):
        items = self._request('punch_card').fetch(ListOf(PunchCardItem))
        if items is None:
            return []
        return list(items)
