# This code is part of Qiskit.
#
# (C) Copyright IBM 2019.
#
# This code is licensed under the Apache License, Version 2.0. You may
# obtain a copy of this license in the LICENSE.txt file in the root directory
# of this source tree or at http://www.apache.org/licenses/LICENSE-2.0.
#
# Any modifications or derivative works of this code must retain this
# copyright notice, and modified files need to carry a notice indicating
# that they have been altered from the originals.

"""Tests for running experiments and jobs."""

import re
import threading
from unittest import mock

from requests import Session

from qxapi import Client, Job
from qxapi.apiconstants import MAX_SEED, MAX_SHOTS
from qxapi.exceptions import (ApiError, ApiServerError, BadBackendError,
                              RegisterSizeError, QXInputValueError, RequestCancelledError)

from ..qxtestcase import QXTestCase
from ..utils import make_session, backend_entry, json_body, query_values

BELL_QASM = ('OPENQASM 2.0;\ninclude "qelib1.inc";\nqreg q[2];\ncreg c[2];\n'
             'h q[0];\ncx q[0],q[1];\nmeasure q -> c;\n')
EXECUTE_RESPONSE = {'status': {'id': 'DONE'}, 'idExecution': 'execution-1', 'idCode': 'code-1'}


class TestJob(QXTestCase):
    """Tests for the job."""

    def test_shots_clamped(self):
        """Test the number of shots is limited to the maximum."""
        with self.assertLogs('qxapi.job', level='WARNING'):
            job = Job([BELL_QASM], shots=MAX_SHOTS + 1)
        self.assertEqual(job.shots, MAX_SHOTS)
        self.assertEqual(Job([BELL_QASM], shots=MAX_SHOTS).shots, MAX_SHOTS)

    def test_no_circuits(self):
        """Test a job can have no circuits."""
        job = Job()
        self.assertEqual(job.qasms, [])
        self.assertIsNone(job.job_id)
        self.assertIsNone(job.shots)
        self.assertIsNone(job.max_credits)

    def test_invalid_timeout(self):
        """Test the timeout must be between 0 and 300 seconds."""
        for timeout in (0, -1, 301):
            with self.subTest(timeout=timeout):
                with self.assertRaises(QXInputValueError):
                    Job([BELL_QASM], timeout=timeout)
        self.assertEqual(Job([BELL_QASM], timeout=300).timeout, 300)

    def test_job_id_set_once(self):
        """Test the job ID cannot be replaced."""
        job = Job([BELL_QASM])
        job._set_job_id('job-1')
        job._set_job_id('job-1')
        with self.assertRaises(QXInputValueError):
            job._set_job_id('job-2')
        self.assertEqual(job.job_id, 'job-1')


class TestRunExperiment(QXTestCase):
    """Tests for running experiments."""

    def setUp(self):
        super().setUp()
        self.server = self.start_server()
        self.server.add_route('/codes/execute', (200, EXECUTE_RESPONSE))
        self.client = Client(make_session(self.server.url))

    def test_defaults(self):
        """Test an experiment uses the default options."""
        self.client.run_experiment(BELL_QASM)

        request = self.server.requests('/codes/execute')[0]
        self.assertEqual(request.method, 'POST')
        self.assertEqual(query_values(request, 'shots'), ['1'])
        self.assertEqual(query_values(request, 'deviceRunType'), ['sim_trivial_2'])
        self.assertEqual(query_values(request, 'seed'), [])
        self.assertEqual(query_values(request, 'access_token'), ['access-token-1'])

        body = json_body(request)
        self.assertEqual(body['codeType'], 'QASM2')
        self.assertRegex(body['name'], re.compile(r'^Experiment #\d{14}$'))

    def test_header_stripped(self):
        """Test the QASM version header is removed and the rest kept untouched."""
        self.client.run_experiment('IBMQASM 2.0;\nqreg q[1];')
        self.client.run_experiment(BELL_QASM)

        requests = self.server.requests('/codes/execute')
        self.assertEqual(json_body(requests[0])['qasm'], '\nqreg q[1];')
        self.assertEqual(json_body(requests[1])['qasm'], BELL_QASM.replace('OPENQASM 2.0;', ''))

    def test_options(self):
        """Test the options of an experiment."""
        self.client.run_experiment(BELL_QASM, backend='ibmqx2', shots=1024, seed=123,
                                   name='bell')

        request = self.server.requests('/codes/execute')[0]
        self.assertEqual(query_values(request, 'shots'), ['1024'])
        self.assertEqual(query_values(request, 'seed'), ['123'])
        self.assertEqual(query_values(request, 'deviceRunType'), ['real'])
        self.assertEqual(json_body(request)['name'], 'bell')

    def test_options_persist(self):
        """Test the options of an experiment are kept for the next calls."""
        self.client.run_experiment(BELL_QASM, shots=512)
        self.client.run_experiment(BELL_QASM)

        requests = self.server.requests('/codes/execute')
        self.assertEqual(query_values(requests[1], 'shots'), ['512'])
        self.assertEqual(self.client.options.shots, 512)

    def test_invalid_seed(self):
        """Test a seed of more than 10 digits is rejected, without requests."""
        with mock.patch.object(Session, 'request') as mock_request:
            with self.assertRaises(ApiError):
                self.client.run_experiment(BELL_QASM, seed=MAX_SEED + 1)
        mock_request.assert_not_called()
        # The invalid seed is not kept.
        self.assertIsNone(self.client.options.seed)

    def test_max_seed(self):
        """Test a seed of 10 digits is accepted."""
        self.client.run_experiment(BELL_QASM, seed=MAX_SEED)
        request = self.server.requests('/codes/execute')[0]
        self.assertEqual(query_values(request, 'seed'), [str(MAX_SEED)])

    def test_unknown_backend(self):
        """Test an unknown backend is rejected, without requests."""
        with self.assertRaises(BadBackendError) as context_manager:
            self.client.run_experiment(BELL_QASM, backend='ibmq_unknown')
        self.assertEqual(context_manager.exception.backend, 'ibmq_unknown')
        self.assertEqual(self.server.requests(), [])

    def test_server_error(self):
        """Test an error embedded in the response is raised."""
        self.server.add_route('/codes/execute', (200, {'error': {
            'name': 'QASMCompileError', 'status': 400, 'message': 'Invalid QASM',
            'statusCode': 400, 'code': 'QASM_NOT_VALID'}}))

        with self.assertRaises(ApiServerError) as context_manager:
            self.client.run_experiment(BELL_QASM)

        self.assertEqual(context_manager.exception.code, 'QASM_NOT_VALID')
        self.assertEqual(context_manager.exception.status_code, 400)

    def test_register_size_error(self):
        """Test the maximum register size of the device is reported."""
        self.server.add_route('/codes/execute', (400, {'error': {
            'message': "The registers exceed the number of qubits, it can't be greater than 5."
        }}))

        with self.assertRaises(RegisterSizeError) as context_manager:
            self.client.run_experiment(BELL_QASM, backend='real')
        self.assertEqual(context_manager.exception.max_qubits, 5)

    def test_cancelled(self):
        """Test a cancelled experiment is not sent."""
        cancel = threading.Event()
        cancel.set()
        with self.assertRaises(RequestCancelledError):
            self.client.run_experiment(BELL_QASM, cancel=cancel)
        self.assertEqual(self.server.requests(), [])

    def test_concurrent_overrides(self):
        """Test concurrent experiments are sent with their own options."""
        errors = []

        def _run(shots):
            try:
                self.client.run_experiment(BELL_QASM, shots=shots, name=str(shots))
            except Exception as ex:  # pylint: disable=broad-except
                errors.append(ex)

        threads = [threading.Thread(target=_run, args=(shots,)) for shots in range(1, 9)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(errors, [])
        requests = self.server.requests('/codes/execute')
        self.assertEqual(len(requests), 8)
        for request in requests:
            self.assertEqual(query_values(request, 'shots'), [json_body(request)['name']])


class TestRunJob(QXTestCase):
    """Tests for running jobs."""

    def setUp(self):
        super().setUp()
        self.server = self.start_server()
        self.server.add_route('/Backends', (200, [backend_entry('ibmqx4'),
                                                  backend_entry('ibmq_qasm_simulator',
                                                                simulator=True)]))
        self.server.add_route('/Jobs', (200, {'id': 'job-1', 'status': 'RUNNING'}))
        self.client = Client(make_session(self.server.url))
        self.client.available_backends()

    def test_run_job(self):
        """Test a job is submitted and tracked."""
        job = Job(['IBMQASM 2.0;\nqreg q[1];', BELL_QASM], shots=1024, max_credits=3)

        returned = self.client.run_job(job, backend='ibmqx4')

        self.assertIs(returned, job)
        self.assertEqual(job.job_id, 'job-1')
        self.assertIs(self.client.job('job-1'), job)
        self.assertEqual(self.client.jobs(), [job])

        body = json_body(self.server.requests('/Jobs')[0])
        self.assertEqual(body, {
            'qasms': [{'qasm': '\nqreg q[1];'},
                      {'qasm': BELL_QASM.replace('OPENQASM 2.0;', '')}],
            'shots': 1024,
            'maxCredits': 3,
            'backend': {'name': 'ibmqx4'}
        })

    def test_no_circuits(self):
        """Test a job without circuits is submitted."""
        job = self.client.run_job(Job(), backend='ibmqx4')
        self.assertEqual(job.job_id, 'job-1')
        self.assertEqual(json_body(self.server.requests('/Jobs')[0])['qasms'], [])

    def test_seed_and_hpc(self):
        """Test the seed and the HPC parameters are sent."""
        self.client.run_job(Job([BELL_QASM]), backend='ibmq_qasm_simulator', seed=42,
                            multi_shot_optimization=True, omp_num_threads=2)

        body = json_body(self.server.requests('/Jobs')[0])
        self.assertEqual(body['seed'], 42)
        self.assertEqual(body['hpc'], {'multi_shot_optimization': True, 'omp_num_threads': 2})
        self.assertEqual(body['backend'], {'name': 'ibmq_qasm_simulator'})

    def test_legacy_names_rejected(self):
        """Test legacy backend names are not accepted for jobs."""
        with self.assertRaises(BadBackendError):
            self.client.run_job(Job([BELL_QASM]), backend='simulator')
        self.assertEqual(self.server.requests('/Jobs'), [])

    def test_invalid_seed(self):
        """Test a seed of more than 10 digits is rejected, without requests."""
        with mock.patch.object(Session, 'request') as mock_request:
            with self.assertRaises(ApiError):
                self.client.run_job(Job([BELL_QASM]), backend='ibmqx4', seed=MAX_SEED + 1)
        mock_request.assert_not_called()

    def test_project_jobs(self):
        """Test a job is submitted to a project."""
        path = '/Network/my-hub/Groups/my-group/Projects/my-project/jobs'
        self.server.add_route(path, (200, {'id': 'job-2'}))

        job = self.client.run_job(Job([BELL_QASM]), backend='ibmqx4', hub='my-hub',
                                  group='my-group', project='my-project')

        self.assertEqual(job.job_id, 'job-2')
        self.assertEqual(len(self.server.requests(path)), 1)
        self.assertEqual(self.server.requests('/Jobs'), [])

    def test_no_job_id(self):
        """Test a response without job ID is rejected."""
        self.server.add_route('/Jobs', (200, {'status': 'RUNNING'}), (200, {'id': 'job-3'}))
        job = Job([BELL_QASM])

        with self.assertRaises(ApiError):
            self.client.run_job(job, backend='ibmqx4')
        self.assertIsNone(job.job_id)
        self.assertEqual(self.client.jobs(), [])

        # The job can be submitted again.
        self.client.run_job(job, backend='ibmqx4')
        self.assertEqual(job.job_id, 'job-3')

    def test_submitted_once(self):
        """Test a submitted job is not sent again."""
        job = self.client.run_job(Job([BELL_QASM]), backend='ibmqx4')

        with self.assertRaises(QXInputValueError):
            self.client.run_job(job, backend='ibmqx4')

        self.assertEqual(len(self.server.requests('/Jobs')), 1)
        self.assertEqual(job.job_id, 'job-1')
        self.assertEqual(self.client.jobs(), [job])

    def test_concurrent_submissions(self):
        """Test a job submitted by several threads at once is sent once."""
        job = Job([BELL_QASM])
        errors = []

        def _run():
            try:
                self.client.run_job(job, backend='ibmqx4')
            except QXInputValueError as ex:
                errors.append(ex)

        threads = [threading.Thread(target=_run) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(len(self.server.requests('/Jobs')), 1)
        self.assertEqual(len(errors), 7)
        self.assertEqual(job.job_id, 'job-1')

    def test_options_used_for_unset_fields(self):
        """Test the execution options fill the fields the job does not set."""
        self.client.run_job(Job([BELL_QASM]), backend='ibmqx4', shots=100, max_credits=5,
                            name='bell', timeout=60)

        body = json_body(self.server.requests('/Jobs')[0])
        self.assertEqual(body['shots'], 100)
        self.assertEqual(body['maxCredits'], 5)
        self.assertEqual(body['name'], 'bell')
        self.assertEqual(body['timeout'], 60)

    def test_job_fields_take_precedence(self):
        """Test the fields set on the job take precedence over the options."""
        job = Job([BELL_QASM], shots=200, max_credits=0, name='job name', timeout=30)

        self.client.run_job(job, backend='ibmqx4', shots=100, max_credits=5,
                            name='bell', timeout=60)

        body = json_body(self.server.requests('/Jobs')[0])
        self.assertEqual(body['shots'], 200)
        self.assertEqual(body['maxCredits'], 0)
        self.assertEqual(body['name'], 'job name')
        self.assertEqual(body['timeout'], 30)

    def test_default_fields(self):
        """Test the defaults of a job without options."""
        self.client.run_job(Job([BELL_QASM]), backend='ibmqx4')

        body = json_body(self.server.requests('/Jobs')[0])
        self.assertEqual(body['shots'], 1)
        self.assertEqual(body['maxCredits'], 0)
        self.assertNotIn('name', body)
        self.assertNotIn('timeout', body)

    def test_unknown_job(self):
        """Test retrieving a job not submitted by the client."""
        with self.assertRaises(QXInputValueError):
            self.client.job('job-unknown')

